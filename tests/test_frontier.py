from menus.crawler import CrawlConfig, EnqueueStatus, Frontier, StatsCollector


def test_request_budget(config):
    config.max_requests_per_crawl = 2
    frontier = Frontier(config)

    results = frontier.seed(
        [
            "https://tonys.example/menu",
            "https://tonys.example/menu/drinks",
            "https://tonys.example/menu/desserts",
        ]
    )

    assert [r.status for r in results] == [
        EnqueueStatus.ENQUEUED,
        EnqueueStatus.ENQUEUED,
        EnqueueStatus.SKIPPED_BUDGET,
    ]


def test_seen_urls_are_normalized(config):
    frontier = Frontier(config)

    first = frontier.push("https://tonys.example/menu", depth=0)
    again = frontier.push("https://tonys.example/menu/?utm_campaign=x", depth=1)

    assert first.accepted
    assert again.status is EnqueueStatus.SKIPPED_SEEN


def test_depth_limit():
    frontier = Frontier(CrawlConfig(start_urls=["https://tonys.example"], max_depth=1))

    assert frontier.push("https://tonys.example/menu", depth=1).accepted
    assert frontier.push("https://tonys.example/menu/2", depth=2).status is EnqueueStatus.SKIPPED_DEPTH


def test_pop_and_close(config):
    frontier = Frontier(config)
    frontier.push("https://tonys.example/menu", depth=0, referrer="https://tonys.example/")

    item = frontier.pop(block=False)
    frontier.task_done()
    frontier.close()

    assert item.url == "https://tonys.example/menu"
    assert item.referrer == "https://tonys.example/"
    assert frontier.pop(block=False) is None
    assert frontier.push("https://tonys.example/x", depth=0).status is EnqueueStatus.SKIPPED_CLOSED
    assert frontier.snapshot()["dequeued"] == 1


def test_enqueue_stats(config):
    config.max_requests_per_crawl = 1
    frontier = Frontier(config)
    stats = StatsCollector()

    stats.record_enqueue_many(
        frontier.seed(["https://tonys.example/menu", "https://tonys.example/menu", "https://tonys.example/b"])
    )
    core = stats.core()

    assert (core.frontier_enqueued, core.frontier_skipped_seen, core.frontier_skipped_budget) == (1, 1, 1)
