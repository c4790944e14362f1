import sys


class Reporter:
    """Human-readable progress and failure output.

    Progress goes to standard output, failures to standard error.  Detail
    lines are only printed when ``verbose`` is set.
    """

    def __init__(self, verbose: bool = False, out=None, err=None):
        self.verbose = verbose
        self._out = out
        self._err = err

    # Streams are looked up lazily so pytest's capsys sees the output.
    @property
    def out(self):
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self):
        return self._err if self._err is not None else sys.stderr

    def info(self, message: str) -> None:
        print(message, file=self.out)

    def detail(self, message: str) -> None:
        if self.verbose:
            print(message, file=self.out)

    def fail(self, reason: str) -> None:
        print(f"Error: {reason}", file=self.err)
        print("Aborting", file=self.err)
