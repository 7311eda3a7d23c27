"""Rebuild a page's block tree from one-level Notion children listings."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .notionBlocks import Block
from .notionSource import ContentServiceError, ContentSource, PageNotFoundError

logger = logging.getLogger("blockpress")

DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 0.5
DEFAULT_CONCURRENCY = 8


@dataclass(frozen=True, slots=True)
class FetchWarning:
    """A subtree that could not be resolved and was rendered without children."""

    block_id: str
    reason: str


@dataclass(frozen=True, slots=True)
class BlockTree:
    blocks: Tuple[Block, ...]
    warnings: Tuple[FetchWarning, ...] = ()


class _TreeAssembler:
    """Per-call state of one assembly: limits, deadline and collected warnings."""

    def __init__(
        self,
        source: ContentSource,
        *,
        retries: int,
        retry_delay: float,
        concurrency: int,
        timeout: Optional[float],
    ) -> None:
        self._source = source
        self._retries = max(retries, 0)
        self._retry_delay = retry_delay
        self._semaphore = asyncio.Semaphore(max(concurrency, 1))
        self._deadline = None if timeout is None else asyncio.get_running_loop().time() + timeout
        self.warnings: List[FetchWarning] = []

    def _remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return self._deadline - asyncio.get_running_loop().time()

    def _degrade(self, block_id: str, reason: str) -> None:
        logger.warning("블록 %s 의 하위 블록을 불러오지 못해 비워 둡니다: %s", block_id, reason)
        self.warnings.append(FetchWarning(block_id=block_id, reason=reason))

    async def _fetch_once(self, block_id: str) -> List[Block]:
        async with self._semaphore:
            # 세마포어 대기 시간도 마감 시각에 포함된다.
            remaining = self._remaining()
            if remaining is not None and remaining <= 0:
                raise asyncio.TimeoutError
            return await asyncio.wait_for(self._source.get_block_children(block_id), remaining)

    async def fetch_children(self, block_id: str) -> Optional[List[Block]]:
        """Best-effort fetch; ``None`` means the subtree is degraded to empty."""

        attempt = 0
        while True:
            try:
                return await self._fetch_once(block_id)
            except asyncio.TimeoutError:
                self._degrade(block_id, "timed out")
                return None
            except PageNotFoundError as exc:
                self._degrade(block_id, str(exc))
                return None
            except ContentServiceError as exc:
                if attempt >= self._retries:
                    self._degrade(block_id, str(exc))
                    return None
                delay = self._retry_delay * (2 ** attempt)
                attempt += 1
                logger.info(
                    "블록 %s 하위 조회 재시도 (%d/%d, %.2fs 후): %s",
                    block_id,
                    attempt,
                    self._retries,
                    delay,
                    exc,
                )
                if delay > 0:
                    await asyncio.sleep(delay)

    async def resolve(self, block: Block) -> Block:
        if not block.needs_children:
            if block.children:
                return block.with_children(await self.attach(block.children))
            return block

        children = await self.fetch_children(block.id)
        if children is None:
            return block.with_children(())
        return block.with_children(await self.attach(children))

    async def attach(self, blocks: Sequence[Block]) -> List[Block]:
        # gather는 입력 순서대로 결과를 돌려주므로 형제 순서가 유지된다.
        return list(await asyncio.gather(*(self.resolve(block) for block in blocks)))


async def attach_children(
    source: ContentSource,
    blocks: Sequence[Block],
    *,
    retries: int = DEFAULT_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: Optional[float] = None,
) -> BlockTree:
    """Resolve every unresolved ``has_children`` block under ``blocks``.

    Blocks whose children are already populated are kept as they are and
    only their descendants are inspected, so running this on a fully
    assembled tree issues no requests.
    """

    assembler = _TreeAssembler(
        source,
        retries=retries,
        retry_delay=retry_delay,
        concurrency=concurrency,
        timeout=timeout,
    )
    resolved = await assembler.attach(blocks)
    return BlockTree(blocks=tuple(resolved), warnings=tuple(assembler.warnings))


async def assemble_block_tree(
    source: ContentSource,
    root_id: str,
    *,
    retries: int = DEFAULT_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: Optional[float] = None,
) -> BlockTree:
    """Fetch the children of ``root_id`` and materialize the whole tree.

    Failing to list the root itself is fatal and propagates to the caller;
    failures below the root only empty the affected subtree.
    """

    blocks = await source.get_block_children(root_id)
    tree = await attach_children(
        source,
        blocks,
        retries=retries,
        retry_delay=retry_delay,
        concurrency=concurrency,
        timeout=timeout,
    )
    logger.debug("블록 트리 조립 완료: root=%s, blocks=%d, warnings=%d", root_id, len(tree.blocks), len(tree.warnings))
    return tree
