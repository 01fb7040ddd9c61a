"""CLI entry point for witstream."""

import asyncio
from pathlib import Path
from typing import Iterator, Optional

import click
from rich.console import Console

from witstream.config.loader import load_config
from witstream.exceptions import WitError
from witstream.models.dictation import Dictation, DictationQuery, Encoding
from witstream.models.message import Message, MessageQuery
from witstream.models.speech import SpeechQuery, SpeechResponse, SpeechUnderstanding
from witstream.models.synthesize import SynthesizeCodec, SynthesizeQuery
from witstream.services.wit_client import WitClient
from witstream.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

UPLOAD_CHUNK_SIZE = 8192

_CODECS = {"mp3": SynthesizeCodec.MP3, "wav": SynthesizeCodec.WAV, "pcm": SynthesizeCodec.PCM}


def read_audio_chunks(path: Path, chunk_size: int = UPLOAD_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield a file's bytes in fixed-size chunks for streaming upload."""
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            yield chunk


def build_audio_query(query_cls, audio: Path, encoding: str, raw_encoding, bits, rate, endian, blocking: bool):
    """
    Build a DictationQuery or SpeechQuery from CLI options.

    Blocking requests upload the whole file; streaming requests upload it in
    chunks while results stream back.
    """
    data = audio.read_bytes() if blocking else read_audio_chunks(audio)
    query = query_cls(encoding=Encoding(encoding), data=data)
    if raw_encoding is not None:
        query = query.with_raw_encoding(raw_encoding)
    if bits is not None:
        query = query.with_bits(bits)
    if rate is not None:
        query = query.with_sample_rate(rate)
    if endian is not None:
        query = query.with_endian(endian == "little")
    return query


def format_dictation(dictation: Dictation) -> str:
    marker = "final" if dictation.is_final else "partial"
    return f"[{marker}] {dictation.text}"


def format_speech_event(event: SpeechResponse) -> str:
    line = f"[{event.type.value}] {event.text}"
    if isinstance(event, SpeechUnderstanding):
        intent = event.intent()
        if intent is not None:
            line += f" -> {intent.name} ({intent.confidence:.2f})"
    return line


def print_message(message: Message) -> None:
    console.print(f"[bold]Text:[/bold] {message.text}")

    intent = message.intent()
    if intent is None:
        console.print("[bold]Intent:[/bold] (none)")
    else:
        console.print(f"[bold]Intent:[/bold] {intent.name} ({intent.confidence:.2f})")

    for name, entities in message.entities.items():
        for entity in entities:
            value = entity.value if entity.value is not None else entity.body
            console.print(f"  [cyan]{name}[/cyan] = {value} ({entity.confidence:.2f})")

    for name, traits in message.traits.items():
        for trait in traits:
            console.print(f"  [magenta]{name}[/magenta] = {trait.value} ({trait.confidence:.2f})")


def get_client(ctx: click.Context) -> WitClient:
    """
    Build the client from configuration.

    Raises:
        click.ClickException: If config is missing, has invalid permissions, or validation fails
    """
    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path) if config_path else None)
    except FileNotFoundError as e:
        logger.error("config_not_found", path=str(config_path) if config_path else None)
        raise click.ClickException(str(e))
    except PermissionError as e:
        logger.error("config_permission_error", path=str(config_path) if config_path else None)
        raise click.ClickException(str(e))
    except Exception as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")

    return WitClient(config)


def audio_options(func):
    """Options shared by the dictate and speech commands."""
    options = [
        click.argument("audio", type=click.Path(exists=True, dir_okay=False, path_type=Path)),
        click.option(
            "--encoding",
            type=click.Choice([e.value for e in Encoding]),
            default=Encoding.WAV.value,
            show_default=True,
            help="Audio format of the file",
        ),
        click.option("--raw-encoding", help="Sample encoding for raw audio (e.g. signed-integer)"),
        click.option("--bits", type=int, help="Bits per sample for raw audio"),
        click.option("--rate", type=int, help="Sample rate in Hz for raw audio"),
        click.option("--endian", type=click.Choice(["little", "big"]), help="Byte order for raw audio"),
        click.option("--blocking", is_flag=True, help="Wait for the full response instead of streaming"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="witstream")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to configuration file (default: ~/.config/witstream/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """witstream: talk to Wit.ai from the command line."""
    configure_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("text")
@click.option("--tag", help="App version tag to query")
@click.option("--limit", "n", type=click.IntRange(1, 8), help="Maximum number of intents")
@click.pass_context
def message(ctx: click.Context, text: str, tag: Optional[str], n: Optional[int]):
    """
    Understand a text utterance.

    Examples:
        witstream message "set an alarm for 7am tomorrow"
        witstream message "what's the weather" --limit 3
    """
    logger.info("message_command_started", length=len(text))

    try:
        query = MessageQuery(q=text, tag=tag, n=n)
    except ValueError as e:
        raise click.ClickException(f"Invalid message: {e}")

    client = get_client(ctx)
    try:
        result = client.get_message_blocking(query)
    except WitError as e:
        raise click.ClickException(str(e))

    print_message(result)


@cli.command()
@audio_options
@click.pass_context
def dictate(ctx: click.Context, audio: Path, encoding: str, raw_encoding, bits, rate, endian, blocking: bool):
    """
    Transcribe an audio file, printing transcriptions as they arrive.

    Examples:
        witstream dictate sample.wav
        witstream dictate sample.raw --encoding raw --raw-encoding signed-integer --bits 16 --rate 16000 --endian little
    """
    logger.info("dictate_command_started", audio=str(audio), encoding=encoding, blocking=blocking)

    try:
        query = build_audio_query(DictationQuery, audio, encoding, raw_encoding, bits, rate, endian, blocking)
        query.content_type()
    except ValueError as e:
        raise click.ClickException(str(e))

    client = get_client(ctx)

    async def stream() -> None:
        async for dictation in client.post_dictation(query):
            click.echo(format_dictation(dictation))

    try:
        if blocking:
            for dictation in client.post_dictation_blocking(query):
                click.echo(format_dictation(dictation))
        else:
            asyncio.run(stream())
    except WitError as e:
        raise click.ClickException(str(e))


@cli.command()
@audio_options
@click.option("--limit", "n", type=click.IntRange(1, 8), help="Maximum number of intents")
@click.pass_context
def speech(ctx: click.Context, audio: Path, encoding: str, raw_encoding, bits, rate, endian, blocking: bool, n):
    """
    Transcribe and understand an audio file.

    Prints every transcription and understanding event with its type.

    Examples:
        witstream speech request.wav
        witstream speech request.mp3 --encoding mp3 --blocking
    """
    logger.info("speech_command_started", audio=str(audio), encoding=encoding, blocking=blocking)

    try:
        query = build_audio_query(SpeechQuery, audio, encoding, raw_encoding, bits, rate, endian, blocking)
        if n is not None:
            query = query.with_limit(n)
        query.content_type()
    except ValueError as e:
        raise click.ClickException(str(e))

    client = get_client(ctx)

    async def stream() -> None:
        async for event in client.post_speech(query):
            click.echo(format_speech_event(event))

    try:
        if blocking:
            for event in client.post_speech_blocking(query):
                click.echo(format_speech_event(event))
        else:
            asyncio.run(stream())
    except WitError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument("text")
@click.option("--voice", required=True, help="Voice name (see 'witstream voices')")
@click.option("--codec", type=click.Choice(sorted(_CODECS)), default="mp3", show_default=True)
@click.option("--style", help="Voice style")
@click.option("--speed", type=click.IntRange(10, 400), help="Speaking rate in percent")
@click.option("--pitch", type=click.IntRange(25, 400), help="Pitch in percent")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="File to write the audio to",
)
@click.pass_context
def synthesize(ctx: click.Context, text: str, voice: str, codec: str, style, speed, pitch, output: Path):
    """
    Synthesize speech to an audio file.

    Examples:
        witstream synthesize "Hello there" --voice Rebecca -o hello.mp3
    """
    logger.info("synthesize_command_started", voice=voice, codec=codec)

    try:
        query = SynthesizeQuery(q=text, voice=voice, style=style, speed=speed, pitch=pitch)
    except ValueError as e:
        raise click.ClickException(f"Invalid synthesis request: {e}")

    client = get_client(ctx)
    try:
        audio = client.post_synthesize_blocking(query, _CODECS[codec])
    except WitError as e:
        raise click.ClickException(str(e))

    output.write_bytes(audio)
    click.echo(f"Wrote {len(audio)} bytes to {output}")


@cli.command()
@click.option("--locale", help="Only list voices for this locale (e.g. en_US)")
@click.pass_context
def voices(ctx: click.Context, locale: Optional[str]):
    """List available synthesis voices."""
    client = get_client(ctx)

    try:
        if locale:
            grouped = {locale: client.get_voices_for_locale_blocking(locale)}
        else:
            grouped = client.get_voices_by_locale_blocking().root
    except WitError as e:
        raise click.ClickException(str(e))

    if not any(grouped.values()):
        click.echo("No voices found")
        return

    for voice_locale in sorted(grouped):
        console.print(f"[bold]{voice_locale}[/bold]")
        for voice in grouped[voice_locale]:
            styles = ", ".join(voice.styles) if voice.styles else "-"
            console.print(f"  {voice.name} ({voice.gender}) styles: {styles}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
