"""Output formatting for pipeline results.

Writes the annotated article set as a single pretty-printed JSON
document, replacing the previous run's document in one step. Numbers
are printed the way JavaScript's JSON.stringify prints them, so the
document reads the same as the one the JS job used to produce.
"""

import json
import logging
import math
import os
import tempfile
from json.encoder import _make_iterencode, encode_basestring, encode_basestring_ascii
from pathlib import Path
from typing import Any

from ..news.models import RunResult

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render a finite float like JavaScript's Number#toString.

    7.0 -> "7", 1e-05 -> "0.00001", 1e-07 -> "1e-7", 1e+21 -> "1e+21".
    """
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text

    mantissa, exponent_text = text.split("e")
    exponent = int(exponent_text)
    # Non-integers at or above 1e16 don't exist, so only small exponents expand
    if -7 < exponent < 0:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.{'0' * (-exponent - 1)}{digits}"
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


class JSNumberEncoder(json.JSONEncoder):
    """JSONEncoder whose floats match JSON.stringify output."""

    def iterencode(self, o: Any, _one_shot: bool = False):
        markers = {} if self.check_circular else None
        encoder = encode_basestring_ascii if self.ensure_ascii else encode_basestring

        def floatstr(value: float) -> str:
            if math.isfinite(value):
                return format_number(value)
            if not self.allow_nan:
                raise ValueError(
                    "Out of range float values are not JSON compliant: " + repr(value)
                )
            if value != value:
                return "NaN"
            return "Infinity" if value > 0 else "-Infinity"

        iterencode = _make_iterencode(
            markers,
            self.default,
            encoder,
            self.indent,
            floatstr,
            self.key_separator,
            self.item_separator,
            self.sort_keys,
            self.skipkeys,
            _one_shot,
        )
        return iterencode(o, 0)


class OutputFormatter:
    """Formats and saves a run's results."""

    def __init__(self, output_path: Path):
        """
        Initialize formatter.

        Args:
            output_path: Destination file for the JSON document
        """
        self.output_path = Path(output_path)

    def format_run_json(self, result: RunResult) -> dict[str, Any]:
        """Format the run result as the output document."""
        return result.to_dict()

    def render(self, result: RunResult) -> str:
        """Serialize the run result to pretty-printed JSON text."""
        return json.dumps(
            self.format_run_json(result),
            cls=JSNumberEncoder,
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
        )

    def save_run(self, result: RunResult) -> Path:
        """
        Save the run output, fully replacing any previous document.

        The document is written to a temporary file beside the destination
        and moved into place, so a failed write leaves the old file intact.

        Returns:
            Path to the written document
        """
        text = self.render(result)

        out_dir = self.output_path.parent
        out_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=out_dir, prefix=f".{self.output_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("[OUTPUT] Wrote %d articles to %s", result.count, self.output_path)
        return self.output_path
