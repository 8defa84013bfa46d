"""Group diarized words into speaker blocks."""

from collections.abc import Iterable

from ..models import RecognizedWord, SpeakerTextBlock


def assemble_speaker_blocks(words: Iterable[RecognizedWord]) -> list[SpeakerTextBlock]:
    """Collapse ordered words into one block per run of the same speaker.

    Words with speaker tag 0 were never assigned a speaker and are dropped
    before runs are formed, so they do not split a run either.
    """
    blocks: list[SpeakerTextBlock] = []
    current_tag: int | None = None
    current_run: list[str] = []

    for word in words:
        if word.speaker_tag == 0:
            continue
        if word.speaker_tag != current_tag and current_run:
            blocks.append(SpeakerTextBlock(speaker_tag=current_tag, text=" ".join(current_run)))
            current_run = []
        current_tag = word.speaker_tag
        current_run.append(word.text)

    if current_run:
        blocks.append(SpeakerTextBlock(speaker_tag=current_tag, text=" ".join(current_run)))

    return blocks


def render_speaker_blocks(blocks: Iterable[SpeakerTextBlock]) -> str:
    return "\n".join(f"Speaker {b.speaker_tag}: {b.text}" for b in blocks)
