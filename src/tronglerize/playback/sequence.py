"""
Playback Sequence
=================

Ordered, read-only collection of decoded meshes.

Loading Rules:
    - Every artifact in the directory is considered, in natural filename
      order (frame2.bin before frame10.bin)
    - A corrupt or unreadable artifact is logged and skipped; it never
      aborts loading of the rest
    - Zero decoded meshes -> EmptySequence
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from tronglerize.codec.mesh_codec import read_artifact
from tronglerize.errors import EmptySequence, MeshError
from tronglerize.frames.scanner import natural_sort_key
from tronglerize.models.mesh import Mesh


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackSequence:
    """
    Decoded frames in presentation order.

    Attributes:
        meshes: Meshes indexed 0..N-1
        names: Artifact filename each mesh was decoded from
    """

    meshes: Tuple[Mesh, ...]
    names: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.meshes)

    def __getitem__(self, index: int) -> Mesh:
        return self.meshes[index]

    def __iter__(self) -> Iterator[Mesh]:
        return iter(self.meshes)


def load_sequence(
    directory: Union[str, Path],
    suffix: str = ".bin",
) -> PlaybackSequence:
    """
    Decode every artifact in `directory` into a PlaybackSequence.

    Args:
        directory: Directory of artifacts
        suffix: Artifact file extension

    Returns:
        PlaybackSequence of every artifact that decoded successfully

    Raises:
        NotADirectoryError: If directory does not exist
        EmptySequence: If no artifact decoded
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"Artifact directory not found: {directory}")

    paths = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == suffix),
        key=natural_sort_key,
    )

    meshes: List[Mesh] = []
    names: List[str] = []
    skipped = 0

    for path in paths:
        try:
            mesh = read_artifact(path)
        except MeshError as e:
            skipped += 1
            logger.error(f"Skipping corrupt artifact {path.name}: {e.kind.value}: {e}")
            continue
        except OSError as e:
            skipped += 1
            logger.error(f"Skipping unreadable artifact {path.name}: {e}")
            continue

        meshes.append(mesh)
        names.append(path.name)

    if not meshes:
        raise EmptySequence(
            f"No decodable artifacts in {directory} "
            f"({len(paths)} found, {skipped} skipped)"
        )

    logger.info(
        f"Loaded {len(meshes)} frame(s) from {directory}"
        + (f" ({skipped} skipped)" if skipped else "")
    )
    return PlaybackSequence(meshes=tuple(meshes), names=tuple(names))
