from __future__ import annotations
from typing import List

import pandas as pd

from .domain import AerodynamicCoefficient

CSV_HEADER = "Time(s),CL,CD,Velocity(m/s),DynamicPressure(Pa)"


def coefficient_records(coefficients: pd.DataFrame) -> List[AerodynamicCoefficient]:
    return [
        AerodynamicCoefficient(
            timestamp=float(row.timestamp),
            cl=float(row.cl),
            cd=float(row.cd),
            velocity=float(row.velocity),
            dynamic_pressure=float(row.dynamic_pressure),
        )
        for row in coefficients.itertuples(index=False)
    ]


def coefficients_to_csv(coefficients: pd.DataFrame) -> str:
    """Download format: time, velocity and pressure to 2 decimals, CL / CD to 4."""
    lines = [CSV_HEADER]
    for c in coefficient_records(coefficients):
        lines.append(f"{c.timestamp:.2f},{c.cl:.4f},{c.cd:.4f},{c.velocity:.2f},{c.dynamic_pressure:.2f}")
    return "\n".join(lines)
