"""
End-to-end workflow tests.

Exercises the full flow: parse a filename, fall back to AI when the rules
are unsure, confirm and learn the result, then resolve sibling files from
the learned pattern without further AI calls.
"""

import pytest

from mediaparser.core.domain.value_objects import MetadataSource, ParseStatus
from mediaparser.core.exceptions import AICallError
from mediaparser.services.learning.learning_service import build_learn_target
from mediaparser.services.parser_service import ParserService

pytestmark = pytest.mark.integration

RELEASES = [
    '[LowConf] 某个奇怪的番剧 01.mkv',
    '[LowConf] 某个奇怪的番剧 02.mkv',
    '[LowConf] 某个奇怪的番剧 03.mkv',
]


class TestLearnAndParseWorkflow:
    """Learn once, resolve siblings from the pattern store."""

    @pytest.fixture
    def service(self, rule_parser, pattern_matcher, ai_parser, retry_queue, progress_sink):
        return ParserService(
            rule_parser,
            matcher=pattern_matcher,
            ai_parser=ai_parser,
            retry_queue=retry_queue,
            progress_sink=progress_sink,
        )

    def test_ai_then_learned(self, service, learning_service, mock_completion):
        mock_completion.complete.return_value = (
            '{"title": "某个奇怪的番剧", "episode": 1, "fansub_group": "LowConf", '
            '"media_type": "tv", "confidence": 0.85}'
        )

        first = service.parse(RELEASES[0])
        assert first.metadata_source == MetadataSource.AI
        assert first.status == ParseStatus.SUCCESS

        target = build_learn_target('series', 'series-42')
        learning_service.learn(RELEASES[0], target)

        results = service.parse_batch(RELEASES[1:])

        assert all(r.metadata_source == MetadataSource.LEARNED for r in results)
        assert all(r.learned_metadata_id == 'series-42' for r in results)
        assert mock_completion.complete.call_count == 1

    def test_outage_then_recovery(self, service, retry_queue, mock_completion):
        mock_completion.complete.side_effect = AICallError('Connection error')

        results = service.parse_batch(RELEASES)

        assert all(r.status == ParseStatus.NEEDS_AI for r in results)
        pending = retry_queue.drain()
        assert sorted(t.payload['filename'] for t in pending) == sorted(RELEASES)

        mock_completion.complete.side_effect = None
        retried = [service.parse(task.payload['filename']) for task in pending]

        assert all(r.metadata_source == MetadataSource.AI for r in retried)
