"""Built-in text functions."""

from actionflow.functions.plugin import function


@function(name="to_uppercase", description="convert text to uppercase")
def to_uppercase(text: str) -> str:
    return str(text).upper()


@function(name="to_lowercase", description="convert text to lowercase")
def to_lowercase(text: str) -> str:
    return str(text).lower()


@function(name="trim", description="remove whitespace from beginning and end of text")
def trim(text: str) -> str:
    return str(text).strip()


@function(name="extract", description="extract a substring from text using start and end positions")
def extract(text: str, start: int, end: int = None) -> str:
    return str(text)[int(start):None if end is None else int(end)]


@function(name="replace", description="replace text in a string")
def replace(text: str, search: str, replacement: str) -> str:
    return str(text).replace(search, replacement)


@function(name="split", description="split a string into an array")
def split(text: str, delimiter: str = ",") -> list:
    return [part.strip() for part in str(text).split(delimiter)]


@function(name="join", description="join an array of strings into a single string")
def join(items: list, delimiter: str = ", ") -> str:
    return delimiter.join(str(item) for item in items)
