"""Write generated pages to disk, copy images, build the archive."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import DocsConfig
from .errors import DuplicatePageError, ExternalToolError
from .naming import page_file_name
from .session import ProcessedDocument

logger = logging.getLogger(__name__)


def remove_html_files(dir_path: Path) -> int:
    """Remove ``*.html`` directly inside ``dir_path``; css, icons etc. stay."""
    removed = 0
    for path in dir_path.iterdir():
        if path.is_file() and path.name.endswith(".html"):
            path.unlink()
            removed += 1
    return removed


def page_files(records: Dict[str, ProcessedDocument]) -> Dict[str, str]:
    """Map each document to its output file; two documents may not share one."""
    files: Dict[str, str] = {}
    owners: Dict[str, str] = {}
    for name in sorted(records):
        page = page_file_name(name)
        if page in owners:
            raise DuplicatePageError(page, [owners[page], name])
        owners[page] = name
        files[name] = page
    return files


def write_pages(records: Dict[str, ProcessedDocument], www_dir: Path) -> List[Path]:
    written: List[Path] = []
    for name, page in page_files(records).items():
        record = records[name]
        path = www_dir / page
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(record.rendered)
        logger.info("wrote '%s', len: %d", path, len(record.rendered))
        written.append(path)
    return written


def copy_images(src_dir: Path, dst_dir: Path) -> None:
    if not src_dir.is_dir():
        logger.info("no images in '%s'", src_dir)
        return
    shutil.copytree(src_dir, dst_dir, dirs_exist_ok=True)


def run_tool(cmd: List[Union[str, Path]], cwd: Optional[Path] = None) -> str:
    logger.info("running: %s", " ".join(str(c) for c in cmd))
    try:
        proc = subprocess.run(
            [str(c) for c in cmd],
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise ExternalToolError(f"Executable not found: {cmd[0]}") from exc
    except subprocess.CalledProcessError as exc:
        raise ExternalToolError(
            f"'{cmd[0]}' failed with exit code {exc.returncode}:\n{exc.stdout or ''}{exc.stderr or ''}"
        ) from exc
    if proc.stdout:
        logger.info(proc.stdout.rstrip())
    return proc.stdout


def make_archive(archiver: Path, archive: Path, www_dir: Path) -> int:
    """Pack ``www_dir`` into ``archive`` with the external archiver; returns its size."""
    if archive.exists():
        archive.unlink()
    run_tool([archiver, archive, www_dir])
    if not archive.is_file():
        raise ExternalToolError(f"'{archiver}' did not create '{archive}'")
    return archive.stat().st_size


def format_size(size: int) -> str:
    if size < 1000:
        return f"{size} B"
    value = float(size)
    for unit in ("kB", "MB"):
        value /= 1000
        if value < 1000:
            return f"{value:.1f} {unit}"
    return f"{value / 1000:.1f} GB"


def sync_website_checkout(website_dir: Optional[Path]) -> Path:
    if website_dir is None or not website_dir.is_dir():
        raise ExternalToolError(f"Directory '{website_dir}' doesn't exist")
    run_tool(["git", "pull"], cwd=website_dir)
    return website_dir


def write_output(records: Dict[str, ProcessedDocument], config: DocsConfig) -> List[Path]:
    """Replace the pages and images in the www dir with this run's output."""
    # fail before touching the previous output
    page_files(records)
    www_dir = config.www_dir
    img_dir = www_dir / config.img_subdir
    # images are copied fresh from the sources
    if img_dir.exists():
        shutil.rmtree(img_dir)
    img_dir.mkdir(parents=True)
    removed = remove_html_files(www_dir)
    logger.info("removed %d stale pages from '%s'", removed, www_dir)

    written = write_pages(records, www_dir)
    copy_images(config.md_dir / config.img_subdir, img_dir)
    return written


def print_summary(config: DocsConfig, archive_size: Optional[int]) -> None:
    if archive_size is not None:
        print(f"size of '{config.archive_path}': {format_size(archive_size)}")
    index = (config.www_dir / page_file_name(config.root_document)).resolve()
    print(f"To view, open:\n{index.as_uri()}")
