from __future__ import annotations
import json
import logging
import re
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import get_settings, setup_logging
from .managers.index import AnagramIndex
from .managers.queries import to_bound
from .schemas import AddWordsRequest, WordCounts
from .stores.memory import MemoryStore
from .words import InvalidWord

logger = logging.getLogger(__name__)

EXTENSION = re.compile(r'\.\w+$')

index = AnagramIndex(MemoryStore())


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _strip_extension(word: Optional[str]) -> str:
    # '/anagrams/read.json' addresses the word 'read'
    return EXTENSION.sub('', word or '')


def _flag(value: Optional[str]) -> Optional[bool]:
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def _echo_bounds(**params: Optional[str]) -> dict:
    # only numeric query values are echoed back
    output = {}
    for name, raw in params.items():
        bound = to_bound(raw)
        if bound is not None:
            output[name] = bound
    return output


def _read_dictionary(path: str) -> str:
    # undecodable bytes become U+FFFD, so their tokens fail validation instead of aborting
    with open(path, 'r', encoding='utf-8', errors='replace') as handle:
        return handle.read()


async def preload(path: str):
    logger.info("preloading dictionary from %s...", path)
    start = time.perf_counter()
    text = await run_in_threadpool(_read_dictionary, path)
    counts = await index.load(text.splitlines())
    logger.info("preload took %.1fms", _elapsed_ms(start))
    logger.info("LOADED: words: %s anagrams: %s", f"{counts.word:,}", f"{counts.anagram:,}")

    stats = await index.stats()
    logger.info(
        "DICTIONARY STATS: words %s, anagrams %s, word length min/max/median/average %s/%s/%s/%s, "
        "cardinality min/max/median/average %s/%s/%s/%s",
        stats.wordCount, stats.anagramCount,
        stats.minWordLength, stats.maxWordLength, stats.medianWordLength, stats.averageWordLength,
        stats.minCardinality, stats.maxCardinality, stats.medianCardinality, stats.averageCardinality,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    if settings.PRELOAD:
        await preload(settings.PRELOAD)
    yield


app = FastAPI(title="Anagram Server", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(InvalidWord)
async def invalid_word_handler(request: Request, exc: InvalidWord):
    logger.info("%s => 400 %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={'message': str(exc)})


# Anagram lookups
@app.get('/anagrams/{word}')
async def get_anagrams(
    word: str,
    limit: Optional[str] = None,
    excludeProperNouns: Optional[str] = None,
    includeInput: Optional[str] = None,
):
    word = _strip_extension(word)
    start = time.perf_counter()
    anagrams = await index.get(
        word,
        include_input=bool(_flag(includeInput)),
        exclude_proper_nouns=bool(_flag(excludeProperNouns)),
        limit=to_bound(limit),
    )
    logger.info('Time to find anagrams for "%s": %.3fms', word, _elapsed_ms(start))
    return {'anagrams': anagrams}


@app.get('/anagrams')
async def query_anagrams(
    count: Optional[str] = None,
    cardinalityMin: Optional[str] = None,
    cardinalityMax: Optional[str] = None,
    lengthMin: Optional[str] = None,
    lengthMax: Optional[str] = None,
    maxCardinality: Optional[str] = None,
    maxLength: Optional[str] = None,
    areAnagrams: Optional[str] = None,
):
    if count == 'true':
        return {'counts': {'anagram': index.anagram_count()}}

    if cardinalityMin or cardinalityMax:
        output = _echo_bounds(cardinalityMin=cardinalityMin, cardinalityMax=cardinalityMax)
        output['anagrams'] = await index.anagrams_by_cardinality(cardinalityMin, cardinalityMax)
        return {'anagramsByCardinality': output}

    if lengthMin or lengthMax:
        output = _echo_bounds(lengthMin=lengthMin, lengthMax=lengthMax)
        output['anagrams'] = await index.anagrams_by_length(lengthMin, lengthMax)
        return {'anagramsByLength': output}

    if maxCardinality == 'true':
        results = await index.max_cardinality_anagrams()
        best = len(results[0]) if results else 0
        return {'maxCardinalityAnagrams': {'maxCardinality': best, 'anagrams': results}}

    if maxLength == 'true':
        results = await index.max_length_anagrams()
        best = len(results[0][0]) if results and results[0] else 0
        return {'maxLengthAnagrams': {'maxLength': best, 'anagrams': results}}

    if areAnagrams:
        words = areAnagrams.split(',')
        result = await index.are_anagrams(words)
        return {'anagramAffinity': {'areAnagrams': result, 'words': [w.strip() for w in words]}}

    return Response(status_code=400)


# Dictionary
@app.get('/words')
async def query_words(count: Optional[str] = None, stats: Optional[str] = None):
    if count == 'true':
        return {'counts': {'word': index.word_count()}}

    if stats == 'true':
        start = time.perf_counter()
        result = await index.stats()
        logger.info("Time to get stats: %.3fms", _elapsed_ms(start))
        return {'stats': result.model_dump()}

    return Response(status_code=400)


@app.post('/words.json')
async def add_words(request: Request):
    start = time.perf_counter()
    try:
        payload = AddWordsRequest.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        return Response(status_code=400)

    # add each word; rejected words simply don't count
    total = WordCounts()
    added = []
    for word in payload.words:
        try:
            counts = await index.add(word)
        except InvalidWord as e:
            logger.warning("Rejected word: %s", e)
            continue
        if counts.word:
            total += counts
            added.append(word.strip())

    if not total.word:
        return Response(status_code=204)

    logger.info("Added %d words in %.3fms", total.word, _elapsed_ms(start))
    return JSONResponse(
        status_code=201,
        content={'counts': total.model_dump(), 'words': [f'/anagrams/{w}' for w in added]},
    )


@app.delete('/words.json')
async def clear_words():
    start = time.perf_counter()
    await index.clear()
    logger.info("Cleared dictionary in %.3fms", _elapsed_ms(start))
    return Response(status_code=204)


@app.delete('/words/{word}')
async def delete_word(word: str, includeAnagrams: Optional[str] = None):
    word = _strip_extension(word)
    if not word:
        return Response(status_code=400)

    start = time.perf_counter()
    deleted = await index.delete(word, include_anagrams=bool(_flag(includeAnagrams)))
    if not deleted:
        return Response(status_code=404)
    logger.info("Deleted %d words in %.3fms", deleted, _elapsed_ms(start))
    return Response(status_code=204)

# For local running: uvicorn anagram_server.main:app --reload --port 3000
