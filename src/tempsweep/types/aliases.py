"""Type aliases using modern PEP 695 syntax."""

from collections.abc import Callable, Sequence

from tempsweep.types.models import CandidateRoot, FoundFile

# Plain callable form of a progress sink, e.g. ``list.append`` or a UI setter
type ProgressCallback = Callable[[float], None]

type CandidateList = Sequence[CandidateRoot]

type FoundFileList = Sequence[FoundFile]
