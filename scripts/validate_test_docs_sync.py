#!/usr/bin/env python3
"""
Validate that test_scenarios_business_summary.md stays in sync with test_integration_scenarios.py.

This script checks:
1. All scenario classes in the test file are documented
2. All scenario methods are referenced in the doc
3. Reports documented scenarios that no longer exist

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
TEST_FILE = PROJECT_ROOT / 'tests' / 'test_integration_scenarios.py'
DOC_FILE = PROJECT_ROOT / 'docs' / 'test_scenarios_business_summary.md'

_CLASS = re.compile(r'^class (Test\w+)')
_METHOD = re.compile(r'^\s+def (test_\w+)')
_DOC_CLASS = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
_DOC_METHOD = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


@dataclass
class SyncReport:
    """Differences between the scenario tests and their business summary."""

    scenarios: dict[str, list[str]]
    documented_classes: set[str]
    documented_methods: set[str]
    missing_classes: set[str] = field(default_factory=set)
    missing_methods: set[str] = field(default_factory=set)
    stale_classes: set[str] = field(default_factory=set)
    stale_methods: set[str] = field(default_factory=set)

    @property
    def in_sync(self) -> bool:
        return not (self.missing_classes or self.missing_methods or self.stale_classes or self.stale_methods)


def scenario_tests(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods, in file order."""
    scenarios = {}
    current = None

    for line in test_file.read_text().splitlines():
        class_match = _CLASS.match(line)
        if class_match:
            current = class_match.group(1)
            scenarios[current] = []
        elif current:
            method_match = _METHOD.match(line)
            if method_match:
                scenarios[current].append(method_match.group(1))

    return scenarios


def documented_tests(doc_file: Path) -> tuple[set[str], set[str]]:
    """Class and method names referenced as **Test Class** / **Test Method**."""
    content = doc_file.read_text()
    return set(_DOC_CLASS.findall(content)), set(_DOC_METHOD.findall(content))


def check_sync(test_file: Path = TEST_FILE, doc_file: Path = DOC_FILE) -> SyncReport:
    scenarios = scenario_tests(test_file)
    doc_classes, doc_methods = documented_tests(doc_file)
    methods = {m for names in scenarios.values() for m in names}

    return SyncReport(
        scenarios=scenarios,
        documented_classes=doc_classes,
        documented_methods=doc_methods,
        missing_classes=set(scenarios) - doc_classes,
        missing_methods=methods - doc_methods,
        stale_classes=doc_classes - set(scenarios),
        stale_methods=doc_methods - methods,
    )


def main():
    for path in (TEST_FILE, DOC_FILE):
        if not path.exists():
            print(f"❌ File not found: {path}")
            sys.exit(1)

    report = check_sync()

    print("=" * 60)
    print("Scenario Documentation Sync")
    print("=" * 60)
    print(f"\nScenario classes: {len(report.scenarios)}")
    print(f"Documented classes: {len(report.documented_classes)}")
    print(f"Documented methods: {len(report.documented_methods)}")

    problems = (
        [f"Missing class documentation: {c}" for c in sorted(report.missing_classes)]
        + [f"Missing method documentation: {m}" for m in sorted(report.missing_methods)]
        + [f"Documented class no longer exists: {c}" for c in sorted(report.stale_classes)]
        + [f"Documented method no longer exists: {m}" for m in sorted(report.stale_methods)]
    )
    if problems:
        print(f"\n❌ OUT OF SYNC ({len(problems)}):")
        for problem in problems:
            print(f"   - {problem}")
    else:
        print("\n✅ All scenarios are documented and in sync!")

    print("\nCoverage by Class:")
    for cls, methods in report.scenarios.items():
        print(f"\n  {'✅' if cls in report.documented_classes else '❌'} {cls}")
        for method in methods:
            print(f"      {'✅' if method in report.documented_methods else '❌'} {method}")

    sys.exit(0 if report.in_sync else 1)


if __name__ == '__main__':
    main()
