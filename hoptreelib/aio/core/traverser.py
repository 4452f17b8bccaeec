"""Async crawl engine.

Discovers an unknown tree by following the child identifiers each fetched
node returns. Fetches run concurrently under a fixed admission cap. A
single collection loop consumes their outcomes, records every node under
the parent that scheduled it and schedules the children it lists.

Coordination goes through two per-crawl objects:

- an asyncio.Semaphore (the admission gate), acquired before a fetch is
  started and released as soon as its network operation ends
- an unbounded asyncio.Queue of FetchOutcome, so a finishing fetch never
  blocks on handing over its result

Only the collection loop touches the AggregationMap and the in-flight
counter, so neither needs a lock.
"""

import asyncio
from typing import Any, Dict, Optional, Set

from ...config import CrawlConfig
from ...errors import CrawlError, FetchError, ProtocolViolationError
from ...logging import get_logger
from .adapter import AsyncNodeFetcher
from .collector import AggregationMap, FragmentReconstructor
from .node import CollectedEntry, FetchJob, FetchOutcome

logger = get_logger(__name__)


class AsyncTreeCrawler:
    """Bounded-concurrency crawler for trees discovered one fetch at a time.

    Every fetch is fatal on failure: the first error cancels all
    outstanding work, the partial results are discarded and the error is
    raised to the caller. There are no retries.

    Example:
        async with HttpNodeFetcher(config) as fetcher:
            crawler = AsyncTreeCrawler(fetcher, config)
            output = await crawler.traverse("start", session)
    """

    def __init__(self, fetcher: AsyncNodeFetcher, config: Optional[CrawlConfig] = None):
        """Initialize crawler.

        Args:
            fetcher: Source of node descriptors
            config: Crawl configuration (defaults to CrawlConfig())

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.fetcher = fetcher
        self.config = config or CrawlConfig()
        self.config.validate()
        self.reconstructor = FragmentReconstructor(
            root_key=self.config.root_key,
            sentinel=self.config.sentinel,
        )
        self._reset_stats()

    @property
    def max_concurrent(self) -> int:
        return self.config.max_concurrent

    def _reset_stats(self):
        self._active = 0
        self.stats: Dict[str, int] = {
            'scheduled': 0,
            'completed': 0,
            'peak_in_flight': 0,
            'peak_active': 0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics of the last crawl.

        Returns:
            Dictionary with scheduled/completed counts, the peak of the
            in-flight counter and the peak of concurrently running fetches
        """
        return {**self.stats, 'max_concurrent': self.max_concurrent}

    async def traverse(self, root_id: str, session: str) -> str:
        """Crawl the tree below root_id and reconstruct its output.

        Args:
            root_id: Identifier of the root node
            session: Session token attached to every fetch

        Returns:
            Fragments concatenated in discovery order

        Raises:
            FetchError: If any node could not be fetched or decoded
            ProtocolViolationError: If a non-first response carries a message
        """
        aggregation = await self.crawl(root_id, session)
        return self.reconstructor.collect(aggregation)

    async def crawl(self, root_id: str, session: str) -> AggregationMap:
        """Fetch every reachable node and collect results by parent.

        Args:
            root_id: Identifier of the root node
            session: Session token attached to every fetch

        Returns:
            Completed AggregationMap (ownership passes to the caller)
        """
        self._reset_stats()
        gate = asyncio.Semaphore(self.max_concurrent)
        results: "asyncio.Queue[FetchOutcome]" = asyncio.Queue()
        tasks: Set[asyncio.Task] = set()
        aggregation = AggregationMap()
        first_result_seen = False
        in_flight = 0

        async def schedule(job: FetchJob) -> None:
            nonlocal in_flight
            # Blocks while the cap is saturated; running fetches keep
            # draining into the unbounded results queue meanwhile.
            await gate.acquire()
            in_flight += 1
            self.stats['scheduled'] += 1
            self.stats['peak_in_flight'] = max(self.stats['peak_in_flight'], in_flight)
            logger.debug(
                "node_scheduled",
                node_id=job.node_id,
                parent_id=job.parent_id,
                order_index=job.order_index,
            )
            task = asyncio.create_task(self._fetch_unit(job, session, gate, results))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        logger.info("crawl_started", root_id=root_id, max_concurrent=self.max_concurrent)
        try:
            await schedule(FetchJob(root_id, self.config.root_key, 0, depth=0))

            while in_flight > 0:
                outcome = await results.get()
                job = outcome.job
                descriptor = self._unwrap(outcome)

                if descriptor.message:
                    if first_result_seen:
                        raise ProtocolViolationError(job.node_id, descriptor.message)
                    logger.info("root_message", node_id=job.node_id, message=descriptor.message)
                first_result_seen = True

                if descriptor.depth != job.depth:
                    logger.warning(
                        "depth_mismatch",
                        node_id=job.node_id,
                        reported=descriptor.depth,
                        expected=job.depth,
                    )

                aggregation.record(
                    job.parent_id,
                    CollectedEntry(job.node_id, descriptor.fragment, job.order_index),
                )

                # A node carrying a fragment ends its branch even if it lists children
                if not descriptor.is_leaf(self.config.sentinel):
                    for index, child_id in enumerate(descriptor.children):
                        await schedule(FetchJob(child_id, job.node_id, index, job.depth + 1))

                in_flight -= 1
                self.stats['completed'] += 1
        except BaseException as e:
            if isinstance(e, CrawlError):
                logger.error("crawl_aborted", stage=e.stage, error=str(e))
            await self._cancel(tasks)
            raise

        logger.info(
            "crawl_finished",
            nodes=self.stats['completed'],
            peak_active=self.stats['peak_active'],
        )
        return aggregation

    async def _fetch_unit(
        self,
        job: FetchJob,
        session: str,
        gate: asyncio.Semaphore,
        results: "asyncio.Queue[FetchOutcome]",
    ) -> None:
        """Run one fetch and hand its tagged outcome to the collection loop.

        The admission slot was acquired by the scheduler and is released
        here as soon as the network operation ends, whatever its result.
        Every fetch queues exactly one outcome, including one ended by a
        CancelledError or other BaseException, which is then re-raised.
        """
        self._active += 1
        self.stats['peak_active'] = max(self.stats['peak_active'], self._active)
        try:
            descriptor = await self.fetcher.fetch(job.node_id, session)
        except BaseException as e:
            results.put_nowait(FetchOutcome(job, error=e))
            if not isinstance(e, Exception):
                raise
        else:
            results.put_nowait(FetchOutcome(job, descriptor=descriptor))
        finally:
            self._active -= 1
            gate.release()

    @staticmethod
    def _unwrap(outcome: FetchOutcome):
        """Return the descriptor of an outcome or raise its error as a FetchError."""
        if outcome.ok:
            return outcome.descriptor
        error = outcome.error
        node_id = outcome.job.node_id
        if isinstance(error, FetchError) and error.node_id == node_id:
            raise error
        if isinstance(error, FetchError):
            raise FetchError(node_id, error.reason) from error
        raise FetchError(node_id, str(error) or type(error).__name__) from error

    @staticmethod
    async def _cancel(tasks: Set[asyncio.Task]) -> None:
        """Cancel outstanding fetches and wait for them to unwind."""
        pending = list(tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
