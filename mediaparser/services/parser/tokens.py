"""
Token tables module.

Regex tables and normalizers for the technical tokens found in release
filenames (quality, source, codec, audio, language), plus filename cleanup
helpers shared by the rule parser, the AI response parser and the learner.
"""

import re

VIDEO_EXTENSIONS = (
    'mkv', 'mp4', 'avi', 'mov', 'wmv', 'flv', 'webm', 'm4v', 'ts', 'm2ts',
    'rmvb', 'rm', 'mpg', 'mpeg', 'iso', 'srt', 'ass', 'ssa', 'sub', 'vtt',
)

_EXTENSION_RE = re.compile(
    r'\.(?:' + '|'.join(VIDEO_EXTENSIONS) + r')$', re.IGNORECASE
)

# 前后不能紧挨字母数字
_L = r'(?<![A-Za-z0-9])'
_R = r'(?![A-Za-z0-9])'

QUALITY_RE = re.compile(
    _L + r'(2160p|1440p|1080p|1080i|720p|576p|480p|4k|uhd)' + _R, re.IGNORECASE
)
RESOLUTION_RE = re.compile(r'(?<!\d)(\d{3,4})\s?[x×]\s?(\d{3,4})(?!\d)')

SOURCE_RE = re.compile(
    _L + r'(blu-?ray|bdremux|bdrip|brrip|bd|web-?dl|webrip|web|hdtv|dvdrip|dvd|hdcam)' + _R,
    re.IGNORECASE
)

VIDEO_CODEC_RE = re.compile(
    _L + r'([xh]\.?264|[xh]\.?265|avc|hevc|av1|xvid)' + _R, re.IGNORECASE
)

AUDIO_CODEC_RE = re.compile(
    _L + r'(flac|aac|eac3|ac3|dts|truehd|atmos|mp3|opus)(?![A-Za-z])', re.IGNORECASE
)

LANGUAGE_RE = re.compile(
    r'(简繁|簡繁|繁简|繁簡|简日|簡日|繁日|简体|簡體|简中|簡中|繁體|繁体|繁中|日語|日语|'
    + _L + r'(?:CHS|CHT|BIG5|JPN)' + _R + ')',
    re.IGNORECASE
)

# 既不是字幕组也不是标题的方括号内容
TECH_TOKEN_RE = re.compile(
    r'^(?:2160p|1440p|1080p|1080i|720p|576p|480p|4k|uhd|x264|x265|h\.?264|h\.?265|'
    r'hevc|avc|av1|aac|flac|bd|bdrip|bluray|blu-ray|web|web-dl|webrip|hdtv|dvd|dvdrip|'
    r'10bit|8bit|hdr|mp4|mkv|chs|cht|big5|jpn|gb)$',
    re.IGNORECASE
)

# 无标题意义的方括号标签
TAG_RE = re.compile(r'(?:\d{1,2}月新番|新番|合集|招募|字幕|完结|完結|\bEND\b|\bFIN\b)', re.IGNORECASE)

SEPARATOR_RE = re.compile(r'[\s._]+')
DECORATION_RE = re.compile(r'[★☆♪♥◆◇■□●○※]')

QUALITY_MAP = {
    '4k': '2160p',
    'uhd': '2160p',
    '1080i': '1080p',
}

SOURCE_MAP = {
    'bluray': 'BluRay',
    'blu-ray': 'BluRay',
    'bd': 'BluRay',
    'bdrip': 'BluRay',
    'brrip': 'BluRay',
    'bdremux': 'BluRay',
    'web-dl': 'WEB-DL',
    'webdl': 'WEB-DL',
    'webrip': 'WEBRip',
    'web': 'WEB',
    'hdtv': 'HDTV',
    'dvdrip': 'DVDRip',
    'dvd': 'DVDRip',
    'hdcam': 'HDCAM',
}

VIDEO_CODEC_MAP = {
    'x264': 'x264',
    'h264': 'x264',
    'avc': 'x264',
    'x265': 'x265',
    'h265': 'x265',
    'hevc': 'x265',
    'av1': 'AV1',
    'xvid': 'XviD',
}

AUDIO_CODEC_MAP = {
    'flac': 'FLAC',
    'aac': 'AAC',
    'ac3': 'AC3',
    'eac3': 'EAC3',
    'dts': 'DTS',
    'truehd': 'TrueHD',
    'atmos': 'Atmos',
    'mp3': 'MP3',
    'opus': 'Opus',
}

LANGUAGE_MAP = {
    '简繁': 'zh-Hans,zh-Hant',
    '簡繁': 'zh-Hans,zh-Hant',
    '繁简': 'zh-Hans,zh-Hant',
    '繁簡': 'zh-Hans,zh-Hant',
    '简日': 'zh-Hans,ja',
    '簡日': 'zh-Hans,ja',
    '繁日': 'zh-Hant,ja',
    '简体': 'zh-Hans',
    '簡體': 'zh-Hans',
    '简中': 'zh-Hans',
    '簡中': 'zh-Hans',
    'chs': 'zh-Hans',
    '繁體': 'zh-Hant',
    '繁体': 'zh-Hant',
    '繁中': 'zh-Hant',
    'cht': 'zh-Hant',
    'big5': 'zh-Hant',
    '日語': 'ja',
    '日语': 'ja',
    'jpn': 'ja',
}

KANJI_NUMBERS = {
    '一': 1, '二': 2, '三': 3, '四': 4, '五': 5,
    '六': 6, '七': 7, '八': 8, '九': 9, '十': 10
}


def strip_extension(filename: str) -> str:
    """去掉已知的媒体/字幕扩展名"""
    return _EXTENSION_RE.sub('', filename.strip())


def normalize_filename(filename: str) -> str:
    """
    Build the exact-match key of a filename.

    Extension removed, dots and underscores turned into spaces, whitespace
    collapsed.
    """
    stem = strip_extension(filename)
    return SEPARATOR_RE.sub(' ', stem).strip()


def clean_title(text: str) -> str:
    """清理标题：分隔符转空格，去掉装饰符号和首尾连接符"""
    text = DECORATION_RE.sub(' ', text)
    text = re.sub(r'[\[\]【】()（）{}「」『』]', ' ', text)
    text = SEPARATOR_RE.sub(' ', text)
    return text.strip(' -–—:：|~/+,&')


def kanji_to_number(text: str) -> int | None:
    """将中文数字转换为阿拉伯数字（支持 1-99）"""
    if not text:
        return None
    if text.isdigit():
        return int(text)
    if text == '十':
        return 10
    if '十' in text:
        tens, _, ones = text.partition('十')
        tens_value = KANJI_NUMBERS.get(tens, 1) if tens else 1
        ones_value = KANJI_NUMBERS.get(ones, 0) if ones else 0
        return tens_value * 10 + ones_value
    return KANJI_NUMBERS.get(text)


def normalize_quality(value: str | None) -> str | None:
    """Normalize a quality token, e.g. 4K -> 2160p, 1080P -> 1080p."""
    if not value:
        return None
    token = value.strip().lower()
    match = RESOLUTION_RE.fullmatch(token)
    if match:
        return height_to_quality(int(match.group(2)))
    token = QUALITY_MAP.get(token, token)
    if re.fullmatch(r'\d{3,4}p', token):
        return token
    return value.strip()


def height_to_quality(height: int) -> str | None:
    if height in (480, 576, 720, 1080, 1440, 2160):
        return f'{height}p'
    return None


def normalize_source(value: str | None) -> str | None:
    """Normalize a source token, e.g. BDRip -> BluRay."""
    if not value:
        return None
    return SOURCE_MAP.get(value.strip().lower(), value.strip())


def normalize_video_codec(value: str | None) -> str | None:
    """Normalize a video codec token, e.g. HEVC -> x265."""
    if not value:
        return None
    key = value.strip().lower().replace('.', '')
    return VIDEO_CODEC_MAP.get(key, value.strip())


def normalize_audio_codec(value: str | None) -> str | None:
    if not value:
        return None
    return AUDIO_CODEC_MAP.get(value.strip().lower(), value.strip())


def normalize_language(value: str | None) -> str | None:
    if not value:
        return None
    return LANGUAGE_MAP.get(value.strip().lower(), value.strip())


def is_tech_token(text: str) -> bool:
    """判断方括号内容是否为纯技术标记（画质、编码、片源等）"""
    return bool(TECH_TOKEN_RE.match(text.strip()))
