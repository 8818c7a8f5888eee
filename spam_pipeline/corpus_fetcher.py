"""
Corpus fetcher for the Apache SpamAssassin public corpus.

Scrapes the corpus index page for archive links, downloads the selected
archives into a working directory and unpacks both compression layers
(bzip2 around a tar archive) into one folder per archive.
"""
import bz2
import os
import shutil
import logging
import tarfile
from pathlib import Path
from typing import List, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from tqdm import tqdm

from spam_pipeline.config import PipelineConfig
from spam_pipeline.models import CorpusArchive, PipelineError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".tar.bz2", ".tbz2", ".tgz", ".tar.gz", ".tar", ".bz2")
CHUNK_SIZE = 64 * 1024


def archive_stem(filename: str) -> str:
    """Strip the archive suffix from a filename: 20021010_spam.tar.bz2 -> 20021010_spam"""
    for suffix in ARCHIVE_SUFFIXES:
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def scrape_archive_links(index_url: str, client: httpx.Client) -> List[str]:
    """Return the href of every anchor on the index page, in page order."""
    logger.info(f"Scraping archive links from {index_url}")
    response = client.get(index_url)
    response.raise_for_status()

    soup = BeautifulSoup(response.text, "html.parser")
    links = [a["href"] for a in soup.find_all("a") if a.has_attr("href")]
    logger.info(f"Found {len(links)} links on index page")
    return links


def select_links(links: List[str], start: int, stop: int) -> List[str]:
    return links[start:stop]


def download_archive(url: str, workdir: Path, client: httpx.Client, force: bool = False) -> CorpusArchive:
    """Stream one archive into the working directory."""
    filename = url.rstrip("/").rsplit("/", 1)[-1]
    target_path = workdir / filename
    if target_path.exists() and not force:
        logger.info(f"Archive {filename} already exists. Skipping download.")
        return CorpusArchive(url=url, archive_path=target_path)

    logger.info(f"Downloading {url} to {target_path}")
    partial_path = target_path.with_name(target_path.name + ".part")
    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            total = int(response.headers.get("Content-Length", 0)) or None
            with open(partial_path, "wb") as f, tqdm(
                total=total, unit="B", unit_scale=True, desc=filename, leave=False
            ) as progress:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    f.write(chunk)
                    progress.update(len(chunk))
    except httpx.HTTPError as e:
        logger.error(f"Failed to download {filename}: {str(e)}")
        partial_path.unlink(missing_ok=True)
        raise

    partial_path.replace(target_path)
    logger.info(f"Successfully downloaded {filename}")
    return CorpusArchive(url=url, archive_path=target_path)


def decompress_archive(archive_path: Path) -> Path:
    """
    Remove the single-file compression layer.

    20021010_spam.tar.bz2 becomes 20021010_spam.tar next to it. Files that are
    not bzip2 compressed are returned unchanged.
    """
    if archive_path.suffix not in (".bz2", ".tbz2"):
        return archive_path

    if archive_path.suffix == ".tbz2":
        tar_path = archive_path.with_suffix(".tar")
    else:
        tar_path = archive_path.with_suffix("")

    logger.info(f"Decompressing {archive_path.name}")
    try:
        with bz2.open(archive_path, "rb") as source, open(tar_path, "wb") as target:
            shutil.copyfileobj(source, target, CHUNK_SIZE)
    except (OSError, EOFError) as e:
        logger.error(f"Failed to decompress {archive_path.name}: {str(e)}")
        tar_path.unlink(missing_ok=True)
        raise
    return tar_path


def extract_archive(tar_path: Path, workdir: Path) -> Path:
    """Extract a tar archive into workdir/<archive name without suffix>."""
    extract_dir = workdir / archive_stem(tar_path.name)
    logger.info(f"Extracting {tar_path.name} to {extract_dir}")
    extract_dir.mkdir(exist_ok=True)
    try:
        with tarfile.open(tar_path, "r:*") as tar:
            tar.extractall(path=extract_dir, filter="data")
    except tarfile.TarError as e:
        logger.error(f"Failed to extract {tar_path.name}: {str(e)}")
        raise
    logger.info(f"Successfully extracted {tar_path.name}")
    return extract_dir


def unpack_archive(archive: CorpusArchive, workdir: Path) -> CorpusArchive:
    tar_path = decompress_archive(archive.archive_path)
    archive.extract_dir = extract_archive(tar_path, workdir)
    if tar_path != archive.archive_path:
        tar_path.unlink()
    return archive


def list_workdir(workdir: Path) -> List[str]:
    return sorted(os.listdir(workdir))


def fetch_corpus(config: PipelineConfig, workdir: Path, client: Optional[httpx.Client] = None) -> List[str]:
    """
    Download and unpack every selected corpus archive.

    Any network or archive failure aborts the whole fetch. Returns the names of
    the top-level entries in the working directory afterwards.
    """
    workdir.mkdir(parents=True, exist_ok=True)
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=config.request_timeout_seconds, follow_redirects=True)

    try:
        links = scrape_archive_links(config.index_url, client)
        selected = select_links(links, config.link_start, config.link_stop)
        if not selected:
            raise PipelineError(
                f"No archive links at positions {config.link_start}:{config.link_stop} of {config.index_url}"
            )
        logger.info(f"Selected {len(selected)} archives: {', '.join(selected)}")

        for href in selected:
            url = urljoin(config.index_url, href)
            archive = download_archive(url, workdir, client, force=config.force_download)
            unpack_archive(archive, workdir)
    finally:
        if owns_client:
            client.close()

    return list_workdir(workdir)
