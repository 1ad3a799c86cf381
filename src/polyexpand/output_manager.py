# output_manager.py

import os

from polyexpand.fmt import strip_ansi
from polyexpand.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str) -> str:
    """
    Resolve user-provided output path.

    Rules:
    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")

    path = os.path.expanduser(path)

    if os.path.isabs(path):
        return os.path.normpath(path)

    return os.path.normpath(os.path.join(workspace_root, path))


class OutputManager:
    """
    Handles all printing/output, including to screen and/or file.

    Usage:
        # Split mode (one file per degree, written on close()):
        om = OutputManager(output_file="results/", degree=4)
        om.write("f(x) = x^4 + ...")
        om.close()

        # Single file (append all runs to one file):
        om = OutputManager(output_file="runs.log")
        om.write("f(x) = x^4 + ...")
        om.close()
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, degree: int | None = None):
        """
        Parameters:
            output_file:
                None or ""       => screen only
                "." or "./"      => per-degree files in the workspace
                endswith "/"     => per-degree files in specified dir
                path/to/file.txt => append all runs to this file
            quiet: if True, no output to screen (only to file)
            degree: polynomial degree, used for the filename in per-degree mode
        """
        self.quiet = quiet
        self.output_file = output_file or ""
        self.degree = degree
        self._buffer: list[str] = []
        self._file_error: OSError | None = None

        # Resolve mode & paths; no files are opened here.
        self._mode: str = "none"     # "none" | "split" | "single"
        self._split_path: str | None = None
        self._single_path: str | None = None

        if self.output_file in (".", "./") or self.output_file.endswith("/"):
            if degree is None:
                raise ValueError("A degree must be provided when outputting to a directory.")
            directory = resolve_output_path(self.output_file, str(workspace_dir()))
            os.makedirs(directory, exist_ok=True)
            self._mode = "split"
            self._split_path = os.path.join(directory, f"{degree}.txt")

        elif self.output_file:
            path = resolve_output_path(self.output_file, str(workspace_dir()))
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._mode = "single"
            self._single_path = path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured)."""
        text = sep.join(str(a) for a in args) + end
        self._buffer.append(text)

        if not self.quiet:
            print(text, end="")

        # Split mode is written once on close(), so nothing is truncated per call.
        if self._mode == "single" and self._single_path and self._file_error is None:
            try:
                with open(self._single_path, "a", encoding="utf-8") as fh:
                    fh.write(strip_ansi(text))
            except OSError as e:
                self._file_error = e
                self._warn(self._single_path, e)

    def write_screen(self, *args, sep: str = " ", end: str = "\n", flush: bool = True) -> None:
        """Write only to the screen, never to the file."""
        if self.quiet:
            return
        print(*args, sep=sep, end=end, flush=flush)

    def getvalue(self) -> str:
        """Returns everything written (with color codes)."""
        return "".join(self._buffer)

    def _warn(self, path: str, e: OSError) -> None:
        self.write_screen(f"[WARNING] Could not write output file: {path} ({type(e).__name__}: {e})")

    def close(self) -> None:
        """Flush buffered output to the per-degree file (split mode) or add a separator (single mode)."""
        if self._mode == "split" and self._split_path and self._buffer:
            try:
                with open(self._split_path, "w", encoding="utf-8") as fh:
                    fh.write(strip_ansi("".join(self._buffer)))
            except OSError as e:
                self._warn(self._split_path, e)
            return

        if self._mode == "single" and self._single_path and self._buffer and self._file_error is None:
            try:
                with open(self._single_path, "a", encoding="utf-8") as fh:
                    fh.write("\n")  # one empty line between runs
            except OSError as e:
                self._warn(self._single_path, e)
