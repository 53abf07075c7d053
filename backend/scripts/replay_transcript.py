"""
Replay a recorded snapshot stream through the interpretation pipeline.

Each non-empty line of the input file is one recognizer snapshot (the full
transcript so far). Sentences are finalized, translated when a target language
is given and a translator is configured, and "spoken" to the log.

    python scripts/replay_transcript.py snapshots.txt --target es --delay 0.2
"""
import argparse
import asyncio
import logging
import os
import sys

# Add backend directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from interpreter.config.settings import settings
from interpreter.services.dispatch import SentenceResult
from interpreter.services.session import SessionController
from interpreter.services.speech import LoggingSpeechDevice, SpeechOutput
from interpreter.services.translation import Language, TranslationGateway, get_translator


def print_sentence(result: SentenceResult):
    if result.translated is not None:
        print(f"#{result.sequence_number} 📝 {result.original}\n    🔄 {result.translated}")
    else:
        print(f"#{result.sequence_number} 📝 {result.original}")


async def replay(file_path: str, target: str, delay: float):
    if not os.path.exists(file_path):
        print(f"❌ File not found: {file_path}")
        return

    with open(file_path, encoding="utf-8") as f:
        snapshots = [line.rstrip("\n") for line in f if line.strip()]
    print(f"📊 {len(snapshots)} snapshots loaded")

    gateway = TranslationGateway(
        get_translator(),
        timeout_sec=settings.TRANSLATION_TIMEOUT_SEC,
        max_concurrent_translations=settings.MAX_CONCURRENT_TRANSLATIONS,
    )
    if target:
        language = Language.from_code(target)
        ready = await gateway.select_language(language, on_progress=lambda m: print(f"⏳ {m}"))
        if not ready:
            print(f"⚠️ Translation to '{target}' unavailable, speaking original text")

    device = LoggingSpeechDevice()
    controller = SessionController(
        gateway,
        SpeechOutput(device, on_status=lambda m: print(f"ℹ️ {m}")),
        on_sentence=print_sentence,
    )

    await controller.start()
    for snapshot in snapshots:
        await controller.on_snapshot(snapshot)
        await asyncio.sleep(delay)
    await controller.stop()
    gateway.close()

    print(f"\n✅ Done: {len(device.spoken)} utterances")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay transcript snapshots")
    parser.add_argument("file", help="Text file with one snapshot per line")
    parser.add_argument("--target", default=settings.TARGET_LANGUAGE, help="Target language code (e.g. es)")
    parser.add_argument("--delay", type=float, default=0.1, help="Seconds between snapshots")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        asyncio.run(replay(args.file, args.target, args.delay))
    except KeyboardInterrupt:
        pass
