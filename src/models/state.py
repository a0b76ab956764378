"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field
from functools import reduce


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the streaming pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputSubdir,
                   speed, seed, instant
        - env_check: inputSourceFile, htmlOutputdir, envOK
        - source_read: sourceText
        - stream_run: renderTree, streamResult
        - results_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        inputFile: Input document filename (relative to inputdir)
        outputSubdir: Subdirectory within outputdir for output
        speed: Reveal speed preset name
        seed: Optional seed for the chunk-size generator
        instant: Skip the reveal and render the whole document at once
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input document
        htmlOutputdir: Final output directory (outputdir + outputSubdir)
        sourceText: Document text read from inputSourceFile
        renderTree: Render tree of the fully revealed document (RenderTree)
        streamResult: Streaming statistics (ticks, renders, failures, last_error)
        writeResult: Written files (html_file, tree_file)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputSubdir: str = field(default=".")
    speed: str = field(default="normal")
    seed: Optional[int] = field(default=None)
    instant: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    htmlOutputdir: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    renderTree: Optional[Any] = field(default=None)  # RenderTree at runtime
    streamResult: Optional[Dict[str, Any]] = field(default=None)
    writeResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the pipeline.

        Args:
            options: Parsed CLI arguments (inputFile, speed, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            stream_run,
            results_write,
            results_report
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
