# src/ventthirds/report.py
from __future__ import annotations

import os
from typing import Callable

from ventthirds.config import DEFAULT_CONFIG, ThirdsConfig
from ventthirds.thresholds import ThresholdResult

# Anything that can show one message to the user.
ReportSink = Callable[[str], None]

DISCLAIMER = ("DISCLAIMER: This script is managed by the VITAL Trial QA Committee and is "
              "to be used ONLY in connection with the VITAL clinical trial.")

GUIDANCE = ("Before applying thresholds, please ensure sub-volumes have been created as "
            "'High Resolution' structures. After applying thresholding, sub-volumes MUST "
            "undergo boolean intersection with the analysed Structure.")

ACCURACY = ("If the above instructions are followed, then the estimated volumetric accuracy "
            "is 10%. Please copy/paste this window to a text editor for record keeping.")


def format_value(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    # "-0" and "-0.00" read as a different threshold
    if text.lstrip("-").strip("0.") == "":
        text = text.lstrip("-")
    return text


def format_report(result: ThresholdResult, structure_id: str,
                  config: ThirdsConfig = DEFAULT_CONFIG) -> str:
    nl = os.linesep
    p = config.precision
    (lo_min, lo_max), (mid_min, mid_max), (up_min, up_max) = result.bands

    def band(name, low, high):
        return f"\t {name} third: {format_value(low, p)} to {format_value(high, p)}"

    text = (
        DISCLAIMER + nl + nl
        + f"Within the selected Structure: ''{structure_id}'', volumetric thirds can be "
          "generated by applying intensity thresholds as follows (3D mode, NO smoothing):"
        + nl + nl
        + band("Lower", lo_min, lo_max) + nl
        + band("Middle", mid_min, mid_max) + nl
        + band("Upper", up_min, up_max) + nl + nl
        + GUIDANCE + nl + nl
        + ACCURACY
    )
    if result.warnings:
        text += (nl + nl + "NOTE: One or more warnings were generated as follows: "
                 + " ".join(result.warnings))
    return text
