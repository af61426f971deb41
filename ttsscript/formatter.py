"""Common interface for output formatters."""

from abc import ABC, abstractmethod

from ttsscript.compiler import Compiler
from ttsscript.models import Script


class Formatter(ABC):
    """Turns a compiled segment sequence into one output representation.

    Formatters never mutate the segments they receive. Adding an output
    target means subclassing this, not changing the compiler.
    """

    @abstractmethod
    def format(self, segments, language: str):
        """Render compiled segments for a language."""

    def format_script(self, script: Script, language: str, compiler: Compiler | None = None):
        """Compile script for language and render the result."""
        compiler = compiler or Compiler()
        return self.format(compiler.compile(script, language), language)
