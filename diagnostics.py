"""
Diagnostics - startup self-check of the fix pipeline

Runs a few known Arabic strings through the processor and reports which
ones came back unchanged or empty. A case passes when the output is
non-empty and differs from the input.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rtl_processor import RTLProcessor, get_processor

logger = logging.getLogger("rtl_fix.diagnostics")

SAMPLE_TEXTS = (
    "مرحبا",
    "عربي",
    "123 عربي",
)


@dataclass
class DiagnosticCase:
    input_text: str
    output_text: Optional[str]

    @property
    def passed(self) -> bool:
        return bool(self.output_text) and self.output_text != self.input_text


@dataclass
class DiagnosticsResult:
    cases: List[DiagnosticCase] = field(default_factory=list)
    skipped: bool = False

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def failures(self) -> List[DiagnosticCase]:
        return [case for case in self.cases if not case.passed]

    @property
    def ok(self) -> bool:
        return not self.skipped and self.passed == self.total

    def to_dict(self) -> dict:
        return {
            "skipped": self.skipped,
            "passed": self.passed,
            "total": self.total,
            "cases": [
                {"input": c.input_text, "output": c.output_text, "passed": c.passed}
                for c in self.cases
            ],
        }


def run_diagnostics(
    processor: Optional[RTLProcessor] = None,
    samples: Sequence[str] = SAMPLE_TEXTS,
) -> DiagnosticsResult:
    """Fix each sample and log the outcome."""
    processor = processor or get_processor()

    if not processor.config.enable_diagnostics:
        logger.debug("Diagnostics disabled")
        return DiagnosticsResult(skipped=True)

    result = DiagnosticsResult()
    for text in samples:
        output = processor.fix(text)
        case = DiagnosticCase(input_text=text, output_text=output)
        result.cases.append(case)

        if case.passed:
            logger.info(f"Diagnostics: '{text}' -> '{output}'")
        else:
            logger.warning(f"Diagnostics: '{text}' was not transformed (got '{output}')")

    logger.info(f"Diagnostics complete: {result.passed}/{result.total} passed")
    return result
