################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import fcntl
import gzip
import os

import lz4.frame

from .common.constants import LOG
from .common.constants import STREAM_CHUNK_SIZE


def _open_compressor(f, compression):
    # Fastest levels: the kernel waits on the pipe while we compress.
    if compression == 'gzip':
        return gzip.GzipFile(fileobj=f, mode='wb', compresslevel=1)
    return lz4.frame.LZ4FrameFile(f, mode='wb',
                                  compression_level=lz4.frame.COMPRESSIONLEVEL_MIN)


def compress_stream(source, dest_path, compression='lz4'):
    """Function that writes a compressed copy of the dump stream.

    The stream has no known length, it's read until EOF. The staging file
    is created exclusively and stays locked until the compressor footer
    has been written.

    Parameters
    ----------
    source : binary file object
        Stream with the core dump, usually sys.stdin.buffer
    dest_path : str
        Staging file that receives the compressed dump
    compression : str
        Name of the codec ('lz4' or 'gzip')

    Returns
    -------
    int
        Number of uncompressed bytes read from the stream
    """
    LOG.info(f'Starting to write compressed core file {dest_path} ({compression})')
    fd = os.open(dest_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o640)
    bytes_read = 0
    with os.fdopen(fd, "wb") as f:
        try:
            fcntl.flock(f, fcntl.LOCK_EX)
            with _open_compressor(f, compression) as compressor:
                while True:
                    buffer = source.read(STREAM_CHUNK_SIZE)
                    if not buffer:
                        break
                    compressor.write(buffer)
                    bytes_read += len(buffer)
            f.flush()
        except Exception:
            fcntl.flock(f, fcntl.LOCK_UN)
            os.remove(dest_path)
            raise
        fcntl.flock(f, fcntl.LOCK_UN)
    LOG.info(f'Finished writing core file {dest_path}: {bytes_read} bytes read')
    return bytes_read
