"""
AI提示词配置文件
将文件名解析的提示词集中管理，便于维护和更新
"""

from typing import List, Tuple

# (文件名, 期望输出) 示例，覆盖中文字幕组、日英字幕组/Raws 以及欧美发布组命名
FILENAME_PARSE_EXAMPLES: List[Tuple[str, str]] = [
    (
        '【幻櫻字幕組】【4月新番】我的英雄學院 第01話 1080P【繁體】.mp4',
        '{"title": "我的英雄學院", "title_romanized": "Boku no Hero Academia", '
        '"episode": 1, "season": 1, "year": null, "quality": "1080p", "source": null, '
        '"codec": null, "fansub_group": "幻櫻字幕組", "language": "zh-Hant", '
        '"media_type": "tv", "confidence": 0.9}'
    ),
    (
        '【极影字幕社】★ 进击的巨人 第01话 HDTV 720P 【简体】.mp4',
        '{"title": "进击的巨人", "title_romanized": "Shingeki no Kyojin", '
        '"episode": 1, "season": 1, "year": null, "quality": "720p", "source": "HDTV", '
        '"codec": null, "fansub_group": "极影字幕社", "language": "zh-Hans", '
        '"media_type": "tv", "confidence": 0.9}'
    ),
    (
        '[Leopard-Raws] Kimetsu no Yaiba - 26 (BD 1920x1080 x264 FLAC).mkv',
        '{"title": "Kimetsu no Yaiba", "title_romanized": null, "episode": 26, '
        '"season": 1, "year": null, "quality": "1080p", "source": "BluRay", '
        '"codec": "x264", "fansub_group": "Leopard-Raws", "language": null, '
        '"media_type": "tv", "confidence": 0.9}'
    ),
    (
        '[SubsPlease] Demon Slayer - 01 (1080p) [ABCD1234].mkv',
        '{"title": "Demon Slayer", "title_romanized": null, "episode": 1, '
        '"season": 1, "year": null, "quality": "1080p", "source": null, '
        '"codec": null, "fansub_group": "SubsPlease", "language": null, '
        '"media_type": "tv", "confidence": 0.9}'
    ),
    (
        'Inception.2010.1080p.BluRay.x264-SPARKS.mkv',
        '{"title": "Inception", "title_romanized": null, "episode": null, '
        '"season": null, "year": 2010, "quality": "1080p", "source": "BluRay", '
        '"codec": "x264", "fansub_group": "SPARKS", "language": null, '
        '"media_type": "movie", "confidence": 1.0}'
    ),
]


def _format_examples() -> str:
    return '\n'.join(
        f'- 输入: {filename}\n  输出: {expected}'
        for filename, expected in FILENAME_PARSE_EXAMPLES
    )


def build_filename_parse_prompt(filename: str) -> str:
    """
    构建文件名解析提示词。

    Args:
        filename: 需要解析的原始文件名（原样嵌入）

    Returns:
        完整的提示词文本
    """
    return f"""你是一位专业的影视文件名解析专家，熟悉中文字幕组、日本字幕组/Raws 以及欧美发布组的命名规则。
你的任务是从下面的文件名中提取结构化的元数据。

文件名: {filename}

## 命名规则说明

### 括号
- 日本/英文字幕组使用半角方括号：[SubsPlease]、[Leopard-Raws]、[Erai-raws]
- 中文字幕组通常使用全角方括号【】：【幻櫻字幕組】、【极影字幕社】
- 文件名开头第一个括号通常是字幕组名称；其余括号可能是画质、语言、季度标签（如【4月新番】）或校验码（如 [ABCD1234]）

### 集数标记
- `第XX話` / `第XX话` / `第XX集`（中文/日文）
- `EP XX` / `Episode XX`
- `SxxExx`（如 S01E05，范围如 S01E01-E03）
- `- XX` 连字符写法（如 `Title - 01`）
- `[XX]` 独立方括号中的数字

### 技术信息
- 画质：1080p、720p、2160p（4K 统一写作 2160p，1920x1080 写作 1080p）
- 片源：BluRay（BD/BDRip 统一写作 BluRay）、WEB-DL、WEBRip、HDTV、DVDRip
- 编码：x264（H.264/AVC）、x265（H.265/HEVC）、AV1
- 语言标记：繁體/繁中/CHT -> zh-Hant，简体/簡中/CHS -> zh-Hans，日语 -> ja

## 示例
{_format_examples()}

## 输出 JSON 结构
{{
  "title": "清理后的标题，保留原始语言（必填，不能为空）",
  "title_romanized": "标题为中日文时的罗马音/英文标题，没有则为 null",
  "episode": 集数数字或 null,
  "season": 季数数字或 null,
  "year": 年份数字或 null,
  "quality": "1080p" / "720p" / "2160p" 或 null,
  "source": "BluRay" / "WEB-DL" / "HDTV" 等或 null,
  "codec": "x264" / "x265" / "AV1" 或 null,
  "fansub_group": "字幕组或发布组名称（不含括号）或 null",
  "language": "zh-Hans" / "zh-Hant" / "ja" 等或 null,
  "media_type": "tv" 或 "movie"（有集数或季数时为 tv，必填）,
  "confidence": 0.0 到 1.0 之间的小数（必填）
}}

## 置信度评分标准
- 1.0：所有主要字段都能确定提取，完全确信
- 0.7-0.9：大部分字段已提取，存在少量歧义
- 0.5-0.7：已提取标题和集数，其他字段不确定
- 0.3-0.5：只能提取基本信息
- 0.0：文件名中没有任何可用信息，无法解析

## 重要提醒
- 只输出合法的 JSON 对象，不要输出任何解释文字，不要使用 markdown 代码块（不要使用 ```）
- 标题中的双引号等特殊字符需要在 JSON 中正确转义
"""
