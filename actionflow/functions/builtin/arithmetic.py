"""Built-in arithmetic functions."""

from functools import reduce

from actionflow.functions.plugin import function


def _numbers(numbers: list) -> list[float]:
    if not isinstance(numbers, (list, tuple)) or len(numbers) < 2:
        raise ValueError("numbers must be a list of at least two values")
    return [float(n) for n in numbers]


def _tidy(value: float):
    return int(value) if float(value).is_integer() else value


@function(name="add", description="add two or more numbers together")
def add(numbers: list) -> float:
    return _tidy(sum(_numbers(numbers)))


@function(name="subtract", description="subtract numbers from left to right")
def subtract(numbers: list) -> float:
    return _tidy(reduce(lambda a, b: a - b, _numbers(numbers)))


@function(name="multiply", description="multiply two or more numbers together")
def multiply(numbers: list) -> float:
    return _tidy(reduce(lambda a, b: a * b, _numbers(numbers)))


@function(name="divide", description="divide numbers from left to right")
def divide(numbers: list) -> float:
    values = _numbers(numbers)
    if any(v == 0 for v in values[1:]):
        raise ZeroDivisionError("Cannot divide by zero")
    return _tidy(reduce(lambda a, b: a / b, values))


@function(name="round", description="round a number to the nearest integer or specified decimal places")
def round_number(number: float, decimals: int = 0) -> float:
    return _tidy(round(float(number), int(decimals)))
