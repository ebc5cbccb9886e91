"""page_scout.sampler: Ограничение большого набора URL перед курацией.

Короткие URL обычно соответствуют главной и разделам сайта, поэтому они
попадают в выборку всегда; остаток берётся равномерно случайно, чтобы не
зависеть от порядка записей в sitemap.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence

from page_scout.logger import get_logger

__all__ = ["sample_urls"]

log = get_logger("sampler")


def sample_urls(
    urls: Sequence[str],
    *,
    rng: Optional[random.Random] = None,
    threshold: int = 200,
    shortest: int = 20,
    random_count: int = 180,
) -> List[str]:
    """Возвращает не более ``shortest + random_count`` URL из *urls*.

    Если URL не больше ``threshold``, список возвращается без изменений.
    ``rng`` позволяет передать детерминированный источник случайности;
    по умолчанию для каждого вызова создаётся новый ``random.Random()``.
    """
    if len(urls) <= threshold:
        return list(urls)

    by_length = sorted(urls, key=len)
    head, rest = by_length[:shortest], by_length[shortest:]
    (rng or random.Random()).shuffle(rest)
    sampled = head + rest[:random_count]
    log.info("Выборка URL: %d из %d (%d коротких)", len(sampled), len(urls), len(head))
    return sampled
