from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from wordstats.analyze.processor import process_stream
from wordstats.core.config import AppConfig
from wordstats.core.errors import FetchError
from wordstats.core.models import WordStats
from wordstats.fetch.http import open_stream
from wordstats.infra.logging import (
    get_unified_logger,
    log_batch_end,
    log_error,
    log_task_end,
    log_task_start,
    mdc_clear,
    mdc_put,
)
from wordstats.lexicon.dictionary import Dictionary


def get_stats(file: str, dictionary: Dictionary, cfg: AppConfig) -> WordStats:
    """Fetch ``file`` from the fixed host and count its words.

    Connection failures stay local to this task and come back as a failed
    result instead of an exception.
    """
    mdc_put("file", file)
    try:
        log_task_start("dispatch", "task", {"file": file, "timeout": cfg.timeout})
        t0 = time.time()
        try:
            with open_stream(file, timeout=cfg.timeout) as stream:
                res = process_stream(stream, file, dictionary)
        except FetchError as e:
            get_unified_logger("dispatch", "task").error("%s", e)
            return WordStats.failed(file, e.reason)
        log_task_end(
            "dispatch",
            "task",
            True,
            {"words": res.words, "english_words": res.english_words, "elapsed": time.time() - t0},
        )
        return res
    finally:
        mdc_clear()


def run_all(files: Sequence[str], dictionary: Dictionary, cfg: AppConfig) -> List[WordStats]:
    """Run one task per file concurrently; results keep the input order."""
    if not files:
        return []
    t0 = time.time()
    workers = cfg.max_workers or len(files)
    log_task_start("dispatch", "batch", {"count": len(files), "workers": workers})

    results: List[WordStats] = []
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wordstats") as ex:
        # Everything is submitted before anything is awaited.
        futures = [ex.submit(get_stats, f, dictionary, cfg) for f in files]
        for file, fut in zip(files, futures):
            try:
                results.append(fut.result())
            except Exception as e:
                log_error("dispatch", "task", e, context=f"{file} failed unexpectedly")
                results.append(WordStats.failed(file, f"{type(e).__name__}: {e}"))

    failed = sum(1 for r in results if not r.success)
    log_batch_end("dispatch", "batch", total=len(results), failed=failed, elapsed=time.time() - t0)
    return results


def format_results(results: Sequence[WordStats]) -> List[str]:
    return [r.summary() for r in results]
