from dataclasses import dataclass

@dataclass
class TaxResult:
    tax: float
    net: float
    effective_rate: float = 0.0
