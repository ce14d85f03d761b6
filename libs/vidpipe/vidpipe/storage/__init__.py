"""Staging area for uploaded, produced and ephemeral files."""

from vidpipe.storage.staging import StagingArea, StagingRole

__all__ = ["StagingArea", "StagingRole"]
