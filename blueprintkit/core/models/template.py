"""
File action model — one line of generate/destroy output.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

FileStatus = Literal["create", "exists", "destroy", "skipped", "missing"]


class FileAction(BaseModel):
    """What happened (or would happen) to one destination file.

    Attributes:
        path:   Destination path relative to the destination root.
        status: create / exists (generate), destroy / skipped / missing (destroy).
        source: Template path relative to the blueprint's files/ directory.
        forced: Destroyed despite local modifications (``--force``).
    """

    path: str
    status: FileStatus
    source: str = ""
    forced: bool = False
