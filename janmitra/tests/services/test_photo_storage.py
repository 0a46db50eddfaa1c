from janmitra.config import MAX_IMAGE_SIZE
from janmitra.exceptions import ValidationFailed
from janmitra.storage import PhotoStorage

from fastapi import UploadFile
import asyncio
import io
import os
import pytest


def upload(filename: str, contents: bytes = b'image') -> UploadFile:
    return UploadFile(file=io.BytesIO(contents), filename=filename)


@pytest.mark.parametrize('filename', ['a.jpg', 'b.JPEG', 'c.png', 'd.gif'])
def test_save_accepts_images(storage: PhotoStorage, filename: str):
    reference = asyncio.run(storage.save(upload(filename)))

    assert reference.startswith('/uploads/issue-')
    assert os.path.exists(storage.path_for(reference))

@pytest.mark.parametrize('filename', ['a.pdf', 'noextension', 'jpg', 'a.jpg.exe'])
def test_save_rejects_other_files(storage: PhotoStorage, filename: str):
    with pytest.raises(ValidationFailed):
        asyncio.run(storage.save(upload(filename)))

def test_save_rejects_large_files(storage: PhotoStorage):
    with pytest.raises(ValidationFailed):
        asyncio.run(storage.save(upload('big.png', b'0' * (MAX_IMAGE_SIZE + 1))))

def test_save_names_are_unique(storage: PhotoStorage):
    first = asyncio.run(storage.save(upload('a.png')))
    second = asyncio.run(storage.save(upload('a.png')))

    assert first != second

def test_path_for_stays_in_directory(storage: PhotoStorage):
    assert os.path.dirname(storage.path_for('/uploads/../../etc/passwd')) == storage.directory

def test_release(storage: PhotoStorage):
    reference = asyncio.run(storage.save(upload('a.png')))

    storage.release(reference)

    assert not os.path.exists(storage.path_for(reference))

def test_release_missing_file(storage: PhotoStorage):
    storage.release('/uploads/never-saved.png')
