"""Audio metadata sniffing via soundfile."""

from pathlib import Path

import soundfile as sf

from ..errors import UnsupportedFormatError
from ..models import AudioEncoding, CodecKind

AUDIO_EXTENSIONS = {".wav", ".flac", ".m4a", ".mp3", ".ogg", ".aac", ".wma"}

# libsndfile container names -> codec kinds we care about
_SOUNDFILE_FORMATS = {
    "WAV": CodecKind.WAVE,
    "WAVEX": CodecKind.WAVE,
    "FLAC": CodecKind.FLAC,
}

# Closed table: anything missing here is rejected.
_ENCODINGS = {
    CodecKind.WAVE: AudioEncoding.LINEAR16,
    CodecKind.FLAC: AudioEncoding.FLAC,
}


def is_audio_file(path: Path) -> bool:
    return path.suffix.lower() in AUDIO_EXTENSIONS


def encoding_for_codec(codec: CodecKind) -> AudioEncoding:
    """Map a detected codec to the Speech API encoding, or fail loudly."""
    try:
        return _ENCODINGS[codec]
    except KeyError:
        raise UnsupportedFormatError(
            f"The codec {codec.value} is not supported. Use WAVE (LINEAR16) or FLAC audio."
        ) from None


class SoundfileMetadataReader:
    """Reads codec and sample rate from the file header."""

    def _info(self, path: Path):
        try:
            return sf.info(str(path))
        except sf.LibsndfileError as e:
            raise UnsupportedFormatError(f"Unable to read audio header of {path}: {e}") from e

    def detect_codec(self, path: Path) -> CodecKind:
        info = self._info(path)
        return _SOUNDFILE_FORMATS.get(info.format, CodecKind.OTHER)

    def detect_sample_rate(self, path: Path) -> int:
        return int(self._info(path).samplerate)
