"""
Test data fixtures for MediaParser tests.

Real-world release filenames covering Western scene naming, Chinese fansub
naming and Japanese/English fansub naming.
"""

# ==================== Western Scene Releases ====================

MOVIE_INCEPTION = 'Inception.2010.1080p.BluRay.x264-SPARKS.mkv'
TV_BREAKING_BAD = 'Breaking.Bad.S01E01.720p.BluRay.x264-DEMAND.mkv'
TV_FRIENDS_RANGE = 'Friends.S01E01-E03.720p.mkv'
MOVIE_TITLE_IS_YEAR = '1917.2019.1080p.mkv'


# ==================== Fansub Releases ====================

FANSUB_HUANYING = '[幻櫻字幕組][我的英雄學院][01][1080P][繁體].mp4'
FANSUB_MIAOMENG_SEASON = '[喵萌奶茶屋] 间谍过家家 第二季 - 05 [1080p][简日].mp4'
FANSUB_SUBSPLEASE_EP1 = '[SubsPlease] Kimetsu no Yaiba - 01 (1080p) [ABCD1234].mkv'
FANSUB_SUBSPLEASE_EP2 = '[SubsPlease] Kimetsu no Yaiba - 02 (1080p) [EF567890].mkv'
FANSUB_SUBSPLEASE_EP13 = '[SubsPlease] Kimetsu no Yaiba - 13 (720p).mkv'
FANSUB_BRACKET_TITLE = '[Nekomoe kissaten][Kimetsu no Yaiba][01][1080p].mkv'


# ==================== Unparseable Names ====================

LOW_CONFIDENCE_NAME = 'random_video_file.mkv'
NO_TITLE_NAME = '[1080p].mkv'


# Format: (filename, title, release_group, season, episode, media_type)
RULE_PARSER_CASES = [
    (MOVIE_INCEPTION, 'Inception', 'SPARKS', None, None, 'movie'),
    (TV_BREAKING_BAD, 'Breaking Bad', 'DEMAND', 1, 1, 'tv'),
    (FANSUB_HUANYING, '我的英雄學院', '幻櫻字幕組', None, 1, 'tv'),
    (FANSUB_MIAOMENG_SEASON, '间谍过家家', '喵萌奶茶屋', 2, 5, 'tv'),
    (FANSUB_SUBSPLEASE_EP1, 'Kimetsu no Yaiba', 'SubsPlease', None, 1, 'tv'),
    (FANSUB_BRACKET_TITLE, 'Kimetsu no Yaiba', 'Nekomoe kissaten', None, 1, 'tv'),
]


# ==================== AI Responses ====================

AI_RESPONSE_VALID = (
    '{"title": "我的英雄學院", "title_romanized": "Boku no Hero Academia", '
    '"episode": 1, "season": 1, "year": null, "quality": "1080P", "source": null, '
    '"codec": "HEVC", "fansub_group": "幻櫻字幕組", "language": "CHT", '
    '"media_type": "tv", "confidence": 0.9}'
)

AI_RESPONSE_FENCED = '```json\n' + AI_RESPONSE_VALID + '\n```'

AI_RESPONSE_MISSING_TITLE = '{"episode": 1, "media_type": "tv", "confidence": 0.8}'
