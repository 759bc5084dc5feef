# File: tests/run_tests.py
#!/usr/bin/env python3
"""
Test runner for Parker tests.

    python tests/run_tests.py                          # everything
    python tests/run_tests.py unit                     # one directory
    python tests/run_tests.py unit.test_pricing        # one module
    python tests/run_tests.py unit.test_pricing.TestPerHourPricingStrategy
"""

import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

# Make the parker package importable without installing it
sys.path.insert(0, str(PROJECT_ROOT))


def run_all_tests(start_dir=None, verbosity=2):
    """Discover and run every test_*.py below start_dir"""
    test_loader = unittest.TestLoader()
    start_dir = start_dir or str(Path(__file__).parent)

    test_suite = test_loader.discover(start_dir, pattern='test_*.py', top_level_dir=str(PROJECT_ROOT))

    test_runner = unittest.TextTestRunner(verbosity=verbosity)
    return test_runner.run(test_suite)


def run_specific_test(test_name, verbosity=2):
    """Run a test directory, module, test case or single test by dotted name"""
    directory = Path(__file__).parent / test_name
    if directory.is_dir():
        return run_all_tests(str(directory), verbosity)

    test_suite = unittest.TestLoader().loadTestsFromName(f'tests.{test_name}')
    test_runner = unittest.TextTestRunner(verbosity=verbosity)
    return test_runner.run(test_suite)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        result = run_specific_test(sys.argv[1])
    else:
        result = run_all_tests()

    sys.exit(0 if result.wasSuccessful() else 1)
