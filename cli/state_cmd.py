"""
CLI 命令：focusmate-state
查看、重算、初始化持久化状态
"""
import json
import logging
import sys
from pathlib import Path

import click

# 添加项目根目录到 sys.path，以便直接运行本文件时导入 core 模块
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from core.exceptions import FocusMateError
from core.logger import setup_logging
from core.state_service import StateService


def _service() -> StateService:
    try:
        return StateService()
    except FocusMateError as e:
        raise click.ClickException(e.get_user_message())


@click.group()
@click.option("--verbose", is_flag=True, help="Echo INFO logs to the console")
def state(verbose):
    """FocusMate 状态管理命令"""
    setup_logging(console_level=logging.INFO if verbose else logging.WARNING)


@state.command()
def show():
    """打印当前状态 (已重算 banking)"""
    click.echo(json.dumps(_service().get_state(), ensure_ascii=False, indent=2))


@state.command()
def recalc():
    """重算 banking 并写回存储"""
    service = _service()
    try:
        result = service.recalculate_stored()
    except FocusMateError as e:
        raise click.ClickException(e.get_user_message())

    if result is None:
        click.echo("ℹ️ Store is empty, nothing to recalculate")
        return
    click.echo(f"✅ Recalculated {len(result['allWeeksData'])} week(s) in {service.store.get_name()} store")


@state.command()
@click.option("--force", is_flag=True, help="Overwrite existing state")
def init(force):
    """写入默认种子状态"""
    service = _service()
    try:
        written = service.initialize(force=force)
    except FocusMateError as e:
        raise click.ClickException(e.get_user_message())

    if not written:
        click.echo("ℹ️ State already exists; use --force to overwrite")
        return
    click.echo(f"✅ Default state written to {service.store.get_name()} store")


if __name__ == "__main__":
    state()
