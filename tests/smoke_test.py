#!/usr/bin/env python3
"""
FieldTrace Smoke Test

Quick import and basic functionality test to ensure the package is working.
This test should run fast and catch major import/API issues.
"""

import sys
import traceback
from pathlib import Path

# Add project root to path for testing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_core_imports():
    """Test that core FieldTrace modules import successfully."""
    print("Testing core imports...")

    import fieldtrace as ft
    print(f"✅ fieldtrace {ft.__version__}")

    # Test JAX availability
    print(f"✅ JAX available: {ft.JAX_AVAILABLE}")

    # Test core modules
    from fieldtrace.expression import parse, test_function, PRESETS  # noqa: F401
    from fieldtrace.fields import Bounds, VectorFieldEngine  # noqa: F401
    from fieldtrace.integrators import integrate_rk4, euler_step  # noqa: F401
    from fieldtrace.tracking import arrow_layout, streamline_seeds, ParticleSystem  # noqa: F401
    from fieldtrace.visualization import VisualizationMode, ModeKind  # noqa: F401
    from fieldtrace.session import FieldSession  # noqa: F401

    print("✅ Core modules imported successfully")


def test_basic_functionality():
    """Test basic functionality with a minimal field."""
    print("\nTesting basic functionality...")

    import fieldtrace as ft

    result = ft.parse("[-y, x]", 2)
    assert result.ok, result.message
    print("✅ Formula compiled")

    engine = ft.VectorFieldEngine(2, result.evaluator)
    assert engine.evaluate_at({"x": 1.0, "y": 0.0}) == (0.0, 1.0)
    print("✅ Field evaluation works")

    path = engine.integrate_rk4({"x": 1.0, "y": 0.0}, steps=10, dt=0.1)
    assert len(path) == 11
    print("✅ RK4 integration works")

    for kind in ft.ModeKind:
        mode = ft.VisualizationMode(kind, engine, rng_seed=0)
        geometry = mode.render()
        assert geometry.points.shape[1] == 3
        mode.dispose()
    print("✅ All visualization modes render")


def test_system_info():
    """Test system information functions."""
    print("\nTesting system information...")

    from fieldtrace.utils import memory_info, get_jax_version, get_config

    info = memory_info()
    assert isinstance(info, dict)
    get_jax_version()
    assert get_config().backend in ("numpy", "jax")
    print("✅ System information available")


def main():
    """Run all smoke tests."""
    print("FieldTrace Smoke Test")
    print("=" * 50)

    tests = [
        ("Core Imports", test_core_imports),
        ("Basic Functionality", test_basic_functionality),
        ("System Info", test_system_info),
    ]

    passed = 0
    total = len(tests)

    for name, test_func in tests:
        print(f"\n🧪 Running: {name}")
        try:
            test_func()
            passed += 1
            print(f"✅ {name}: PASSED")
        except Exception as e:
            print(f"❌ {name}: ERROR - {e}")
            traceback.print_exc()

    print(f"\n📊 Results: {passed}/{total} tests passed")

    if passed == total:
        print("🎉 All smoke tests PASSED!")
        return 0
    else:
        print("💥 Some smoke tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
