"""Output sinks for print statements. The evaluator never writes to the console itself: it is handed a sink."""

from abc import ABC, abstractmethod


class OutputSink(ABC):

    @abstractmethod
    def write_line(self, text):
        """Writes text followed by a line break."""


class ConsoleSink(OutputSink):
    """Writes to stdout."""

    def write_line(self, text):
        print(text)


class BufferSink(OutputSink):
    """Collects lines in memory. Used by tests and anywhere output needs to be inspected."""

    def __init__(self):
        self.lines = []

    def write_line(self, text):
        self.lines.append(text)

    def getvalue(self):
        return "".join(line + "\n" for line in self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __len__(self):
        return len(self.lines)
