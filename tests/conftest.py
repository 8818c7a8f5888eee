import bz2
import io
import tarfile
from pathlib import Path
from typing import Dict

import pytest

HAM_EMAILS = [
    b"From: alice@example.com\nSubject: lunch meeting\n\nAre we still meeting for lunch on Tuesday?\n",
    b"From: bob@example.com\nSubject: project report\n\nThe quarterly report is attached, please review.\n",
    b"From: carol@example.com\nSubject: weekend plans\n\nHiking on Saturday, bring water and snacks.\n",
]

SPAM_EMAILS = [
    b"From: winner@prizes.biz\nSubject: You WON $1000000!!!\n\nClaim your prize now, click here!!!\n",
    b"From: deals@cheap.biz\nSubject: cheap pills\n\nBuy cheap pills online, limited offer, 90% off\n",
]


def write_folder(folder: Path, emails) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    for i, content in enumerate(emails):
        (folder / f"{i:05d}.{i}abc").write_bytes(content)
    return folder


@pytest.fixture
def ham_folder(tmp_path):
    return write_folder(tmp_path / "easy_ham", HAM_EMAILS)


@pytest.fixture
def spam_folder(tmp_path):
    return write_folder(tmp_path / "spam", SPAM_EMAILS)


def make_tar_bz2(files: Dict[str, bytes]) -> bytes:
    """Build a .tar.bz2 archive in memory from {member name: content}."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return bz2.compress(buffer.getvalue())
