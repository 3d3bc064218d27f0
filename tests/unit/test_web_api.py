"""
Tests for the HTTP API.

Tests Flask controllers, the response envelope and error mapping, using a
container whose pattern store points at a temporary database.
"""

import pytest
from dependency_injector import providers

from tests.fixtures.test_data import (
    FANSUB_SUBSPLEASE_EP1,
    FANSUB_SUBSPLEASE_EP2,
    MOVIE_INCEPTION,
    TV_BREAKING_BAD,
)


class TestWebAPI:
    """Tests for the parser and learning blueprints."""

    @pytest.fixture
    def container(self, test_db_session):
        from mediaparser.container import Container

        container = Container()
        container.db_manager.override(providers.Object(test_db_session))
        yield container
        container.unwire()
        container.db_manager.reset_override()

    @pytest.fixture
    def app(self, container):
        """Create Flask app for testing."""
        from mediaparser.interface.web.app import create_app

        app = create_app(container)
        app.config['TESTING'] = True
        return app

    @pytest.fixture
    def client(self, app):
        """Create test client."""
        return app.test_client()

    def _learn(self, client, filename=FANSUB_SUBSPLEASE_EP1):
        return client.post('/api/learning/patterns', json={
            'filename': filename,
            'metadataId': 'series-1',
            'metadataType': 'series',
            'tmdbId': 85937,
        })

    # ===== Health =====

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok'}

    # ===== Parser =====

    def test_parse(self, client):
        response = client.post('/api/parser/parse', json={'filename': MOVIE_INCEPTION})

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['data']['title'] == 'Inception'
        assert body['data']['year'] == 2010
        assert body['data']['metadata_source'] == 'regex'

    @pytest.mark.parametrize('payload', [{}, {'filename': ''}, {'filename': 123}])
    def test_parse_bad_request(self, client, payload):
        response = client.post('/api/parser/parse', json=payload)

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_parse_requires_json(self, client):
        response = client.post('/api/parser/parse', data='filename=x',
                               content_type='application/x-www-form-urlencoded')

        assert response.status_code == 400

    def test_parse_batch(self, client):
        filenames = [TV_BREAKING_BAD, MOVIE_INCEPTION]

        response = client.post('/api/parser/parse-batch', json={'filenames': filenames})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert [item['original_filename'] for item in data] == filenames

    @pytest.mark.parametrize('filenames', ['not-a-list', [1, 2], []])
    def test_parse_batch_bad_request(self, client, filenames):
        response = client.post('/api/parser/parse-batch', json={'filenames': filenames})

        assert response.status_code == 400

    def test_parse_batch_too_large(self, client, container):
        max_size = container.parser_service()._max_batch_size

        response = client.post('/api/parser/parse-batch',
                               json={'filenames': [MOVIE_INCEPTION] * (max_size + 1)})

        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'VALIDATION_ERROR'

    # ===== Learning =====

    def test_learn_pattern(self, client):
        response = self._learn(client)

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['pattern'] == '[SubsPlease] Kimetsu no Yaiba'
        assert data['patternType'] == 'fansub'
        assert data['metadataType'] == 'series'
        assert data['tmdbId'] == 85937

    def test_learn_sibling_episode_returns_same_id(self, client):
        first = self._learn(client).get_json()['data']
        second = self._learn(client, FANSUB_SUBSPLEASE_EP2).get_json()['data']

        assert first['id'] == second['id']

    @pytest.mark.parametrize('payload', [
        {'filename': FANSUB_SUBSPLEASE_EP1, 'metadataId': 's-1', 'metadataType': 'anime'},
        {'filename': FANSUB_SUBSPLEASE_EP1, 'metadataType': 'series'},
        {'metadataId': 's-1', 'metadataType': 'series'},
    ])
    def test_learn_validation(self, client, payload):
        response = client.post('/api/learning/patterns', json=payload)

        assert response.status_code == 400

    def test_list_patterns_and_stats(self, client):
        self._learn(client)
        client.post('/api/learning/match', json={'filename': FANSUB_SUBSPLEASE_EP2})

        listing = client.get('/api/learning/patterns').get_json()['data']
        stats = client.get('/api/learning/stats').get_json()['data']

        assert listing['totalCount'] == 1
        assert listing['patterns'][0]['useCount'] == 1
        assert listing['stats']['totalPatterns'] == 1
        assert stats == {
            'totalPatterns': 1,
            'totalApplied': 1,
            'mostUsedPattern': '[SubsPlease] Kimetsu no Yaiba',
            'mostUsedCount': 1,
        }

    def test_get_and_delete_pattern(self, client):
        pattern_id = self._learn(client).get_json()['data']['id']

        assert client.get(f'/api/learning/patterns/{pattern_id}').status_code == 200
        assert client.delete(f'/api/learning/patterns/{pattern_id}').status_code == 204
        assert client.get(f'/api/learning/patterns/{pattern_id}').status_code == 404
        assert client.delete(f'/api/learning/patterns/{pattern_id}').status_code == 404

    def test_match(self, client):
        pattern_id = self._learn(client).get_json()['data']['id']

        response = client.post('/api/learning/match', json={'filename': FANSUB_SUBSPLEASE_EP2})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['matchType'] == 'pattern'
        assert data['mapping']['id'] == pattern_id

    def test_match_miss(self, client):
        response = client.post('/api/learning/match', json={'filename': MOVIE_INCEPTION})

        assert response.status_code == 404

    def test_parse_after_learning(self, client):
        self._learn(client)

        data = client.post(
            '/api/parser/parse', json={'filename': FANSUB_SUBSPLEASE_EP2}
        ).get_json()['data']

        assert data['metadata_source'] == 'learned'
        assert data['learned_metadata_id'] == 'series-1'
        assert data['episode'] == 2
