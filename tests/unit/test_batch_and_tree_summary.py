import json

from application.aggregation import aggregate_history, outcomes_to_history, save_tree, summarize_tree
from application.batching import run_batch
from infrastructure.providers.base import OracleReply
from infrastructure.providers.mock import MockAdapter


def _reply(url_type: str, fmt: str, *hierarchy: str) -> str:
    payload = {"url_type": url_type, "content_format": fmt, "content_type_hierarchy": list(hierarchy)}
    return "```json\n" + json.dumps(payload) + "\n```"


def test_batch_keeps_going_after_failures(cfg, prompt, page_fetcher) -> None:
    adapter = MockAdapter(
        cfg=cfg,
        replies=[
            _reply("Blog", "HTML", "Text", "Tutorial"),
            OracleReply(block_reason="SAFETY"),
            "no json here",
        ],
    )
    rows = [("1", "https://a.example"), ("2", "https://b.example"), ("3", "https://c.example"), (None, "nope")]
    outcomes, stats = run_batch(rows, cfg=cfg, adapter=adapter, prompt=prompt, fetcher=page_fetcher)

    assert [o.status.value for o in outcomes] == ["success", "blocked", "failure", "failure"]
    assert stats["total_urls"] == 4
    assert (stats["success"], stats["blocked"], stats["failure"]) == (1, 1, 2)
    assert outcomes[3].status_code == 400
    assert page_fetcher.calls == ["https://a.example", "https://b.example", "https://c.example"]


def test_batch_history_builds_tree(cfg, prompt, page_fetcher, tmp_path) -> None:
    adapter = MockAdapter(
        cfg=cfg,
        replies=[
            _reply("Blog", "HTML", "Text", "Tutorial"),
            _reply("blog", "PDF", "Text", "Guide"),
            _reply(" BLOG ", "html", "text", "tutorial"),
        ],
    )
    rows = [("1", "https://a.example"), ("2", "https://b.example"), ("3", "https://c.example")]
    outcomes, _ = run_batch(rows, cfg=cfg, adapter=adapter, prompt=prompt, fetcher=page_fetcher)

    tree = aggregate_history(outcomes_to_history(outcomes))
    assert summarize_tree(tree) == ["Blog > Text > Tutorial (2)", "Blog > PDF > Text > Guide (1)"]

    path = save_tree(tree, tmp_path / "tree.json")
    assert json.loads(path.read_text(encoding="utf-8")) == tree.to_dict()
