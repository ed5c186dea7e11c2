"""
File storage abstraction.

Provides a simple interface for storing and retrieving rendered images.
Currently uses local filesystem, can be extended to S3 or other backends.
"""
from pathlib import Path
from typing import Optional
import uuid


class FileStorage:
    """
    Local file storage implementation.

    Files are organized as:
    - media/users/{user_id}/generated/  - Images rendered for a user
    - media/frames/  - Images rendered for social frames (no user required)

    Every path handed out or written stays inside the media root; anything
    that would resolve outside it raises ValueError.
    """

    def __init__(self, media_root: str = "media"):
        self.media_root = Path(media_root)
        self.media_root.mkdir(parents=True, exist_ok=True)
        self._resolved_root = self.media_root.resolve()

    def get_user_generated_dir(self, user_id: str) -> Path:
        """Get the generated-images directory for a user."""
        path = self._confined(self._resolved_root / "users" / user_id / "generated")
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_frames_dir(self) -> Path:
        path = self._resolved_root / "frames"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _write(self, path: Path, data: bytes) -> str:
        relative = self._relative(path)
        # Write to a sibling temp file first so readers never see a partial image
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "wb") as f:
            f.write(data)
        tmp_path.replace(path)
        return relative

    def _confined(self, path: Path) -> Path:
        resolved = path.resolve()
        if not resolved.is_relative_to(self._resolved_root):
            raise ValueError(f"Path escapes media root: {path}")
        return resolved

    def _relative(self, path: Path) -> str:
        return self._confined(path).relative_to(self._resolved_root).as_posix()

    def save_generated_image(
        self,
        user_id: str,
        data: bytes,
        image_id: Optional[str] = None,
        extension: str = ".png",
    ) -> str:
        """
        Save a rendered image for a user.

        Returns:
            Relative path to the saved file
        """
        filename = f"{image_id or uuid.uuid4()}{extension}"
        return self._write(self.get_user_generated_dir(user_id) / filename, data)

    def save_frame_image(self, data: bytes, image_id: Optional[str] = None) -> str:
        """Save a frame image. Returns its relative path."""
        filename = f"{image_id or uuid.uuid4()}.png"
        return self._write(self.get_frames_dir() / filename, data)

    def get_absolute_path(self, relative_path: str) -> Path:
        """Convert a relative path to absolute, refusing paths outside the media root."""
        return self._confined(self._resolved_root / relative_path)

    def delete_file(self, relative_path: str) -> None:
        """Delete a stored file if it exists."""
        self.get_absolute_path(relative_path).unlink(missing_ok=True)
