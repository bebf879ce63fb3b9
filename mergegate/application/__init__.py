from mergegate.application.gate_evaluator import GateEvaluator, ResultCallback

__all__ = [
    "GateEvaluator",
    "ResultCallback",
]
