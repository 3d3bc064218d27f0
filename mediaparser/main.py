"""
MediaParser Application Entry Point.

Initializes logging and the database, then either starts the HTTP API
or runs a one-off parse / learn command.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime

# 设置日志路径
log_path = os.getenv('LOG_PATH', 'logs')
os.makedirs(log_path, exist_ok=True)

today = datetime.now().strftime('%Y-%m-%d')
log_file = os.path.join(log_path, f'mediaparser_{today}.log')

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file, encoding='utf-8'),
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def init_database():
    """初始化数据库"""
    from mediaparser.container import container

    logger.info('💾 正在初始化数据库...')
    container.db_manager().init_db()
    logger.info('✅ 数据库初始化完成')


def handle_parse_command(args, container) -> int:
    """解析命令行给出的文件名并输出 JSON"""
    parser_service = container.parser_service()
    if len(args.filenames) == 1:
        results = [parser_service.parse(args.filenames[0])]
    else:
        results = parser_service.parse_batch(args.filenames)

    output = [result.to_dict() for result in results]
    print(json.dumps(output if len(output) > 1 else output[0], ensure_ascii=False, indent=2))
    return 0


def handle_learn_command(args, container) -> int:
    """从命令行学习一个文件名模式"""
    from mediaparser.services.learning.learning_service import build_learn_target

    learning_service = container.learning_service()
    target = build_learn_target(args.type, args.metadata_id, args.tmdb_id)
    mapping = learning_service.learn(args.filename, target)
    print(json.dumps(mapping.to_dict(), ensure_ascii=False, indent=2))
    return 0


def run_webui(container, host: str, port: int):
    from mediaparser.interface.web.app import create_app

    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    app = create_app(container)
    logger.info(f'🌐 Web API 已启动: http://{host}:{port}')
    app.run(host=host, port=port, debug=False, use_reloader=False)


def main():
    """主程序入口"""
    from mediaparser.container import container
    from mediaparser.core.config import config
    from mediaparser.core.exceptions import MediaParserError

    parser = argparse.ArgumentParser(description='MediaParser - 媒体文件名解析服务')
    parser.add_argument('--debug', action='store_true', help='启用debug模式')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    subparsers.add_parser('serve', help='启动 HTTP API（默认）')

    parse_parser = subparsers.add_parser('parse', help='解析文件名')
    parse_parser.add_argument('filenames', nargs='+', help='文件名')

    learn_parser = subparsers.add_parser('learn', help='学习文件名模式')
    learn_parser.add_argument('filename', help='已确认的文件名')
    learn_parser.add_argument('metadata_id', help='元数据ID')
    learn_parser.add_argument('--type', default='series', choices=['movie', 'series'])
    learn_parser.add_argument('--tmdb-id', type=int, default=None, help='TMDB ID')

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info('🐛 DEBUG模式已启用')

    logger.info('🚀 MediaParser 启动中...')
    logger.info(f'📁 配置文件路径: {os.getenv("CONFIG_PATH", "config.json")}')

    init_database()

    try:
        if args.command == 'parse':
            sys.exit(handle_parse_command(args, container))
        elif args.command == 'learn':
            sys.exit(handle_learn_command(args, container))
    except MediaParserError as e:
        logger.error(f'❌ {e}')
        sys.exit(1)

    try:
        run_webui(container, config.webui.host, config.webui.port)
    except KeyboardInterrupt:
        logger.info('🛑 接收到停止信号，正在退出...')
    finally:
        container.db_manager().dispose()
        logger.info('✅ 已优雅关闭')


if __name__ == '__main__':
    main()
