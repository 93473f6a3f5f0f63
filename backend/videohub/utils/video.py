"""
Video file utilities using FFmpeg's ffprobe
"""
import os
import subprocess

from videohub.config import settings
from videohub.logger import media_logger


def probe_duration(video_path: str, ffprobe_path: str | None = None) -> float | None:
    """
    Read the container duration of a local video file.

    Args:
        video_path: Path to the video file
        ffprobe_path: ffprobe executable (defaults to settings.ffprobe_path)

    Returns:
        Duration in seconds, or None when ffprobe is unavailable or the file
        carries no duration
    """
    if not os.path.exists(video_path):
        media_logger.warning(f"Cannot probe missing file: {video_path}")
        return None

    command = [
        ffprobe_path or settings.ffprobe_path,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        video_path,
    ]

    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
            text=True,
        )
        return float(result.stdout.strip())
    except FileNotFoundError:
        media_logger.error("ffprobe is not installed; video duration unavailable")
        return None
    except subprocess.CalledProcessError as e:
        media_logger.error(f"ffprobe failed for {video_path}: {e.stderr.strip()}")
        return None
    except ValueError:
        media_logger.warning(f"ffprobe reported no duration for {video_path}")
        return None
