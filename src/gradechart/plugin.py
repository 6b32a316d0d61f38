from __future__ import annotations

import asyncio
import base64
from pathlib import Path
from time import monotonic

from nonebot import get_driver, logger, on_message
from nonebot.adapters.onebot.v11 import Bot, GroupMessageEvent, MessageSegment
from nonebot.exception import ActionFailed

from gradechart.command import normalize_command_text, parse_bot_command
from gradechart.config import settings
from gradechart.plotter import ChartStyle
from gradechart.repository import GradeRepository
from gradechart.service import GradeChartService

driver = get_driver()
repo = GradeRepository(settings.db_path)
service = GradeChartService(
    repository=repo,
    config=settings.histogram_config(),
    chart_dir=settings.chart_dir,
    style=ChartStyle(color=settings.chart_color, font_path=settings.font_path),
)

_locks: dict[int, asyncio.Lock] = {}
_last_manual_trigger_at: dict[int, float] = {}
MANUAL_TRIGGER_COOLDOWN_SECONDS = 8.0

CHART_HELP_TEXT = (
    "Usage: `/chart <assignment id>`\n"
    "Shows how many students received a grade in each range of the assignment.\n"
    "Rules:\n"
    "1) Only the latest attempt of each student counts\n"
    "2) The chart appears after the due date and once you have a grade\n"
    "3) Ranges are [lower; upper), the last one is [max; max]"
)

ALL_HELP_TEXT = (
    "Commands:\n"
    "`/h`: show this help\n"
    "`/chart <assignment id>`: grades chart for an assignment\n"
    "`/chart help`: chart rules"
)

chart_msg = on_message(priority=10, block=True)


def _get_lock(group_id: int) -> asyncio.Lock:
    if group_id not in _locks:
        _locks[group_id] = asyncio.Lock()
    return _locks[group_id]


def _image_segment_from_file(path: Path) -> MessageSegment:
    raw = path.read_bytes()
    b64 = base64.b64encode(raw).decode("ascii")
    return MessageSegment.image(f"base64://{b64}")


def _is_group_allowed(group_id: int) -> bool:
    return str(group_id) in set(settings.enabled_groups)


async def _send_chart(bot: Bot, group_id: int, user_id: int, assignment_id: int) -> bool:
    lock = _get_lock(group_id)
    async with lock:
        logger.info(
            "Start grades chart for assignment {} (user {}, group {})",
            assignment_id,
            user_id,
            group_id,
        )
        try:
            result = await service.run_once(assignment_id, user_id)
        except Exception:
            logger.exception(
                "Group {} chart for assignment {} failed", group_id, assignment_id
            )
            return False

        try:
            await bot.send_group_msg(group_id=group_id, message=result.summary_text)
        except ActionFailed as exc:
            logger.warning("Group {} summary send failed: {}", group_id, exc)
            return False

        if result.chart_image:
            try:
                await bot.send_group_msg(
                    group_id=group_id,
                    message=_image_segment_from_file(result.chart_image.resolve()),
                )
            except ActionFailed as exc:
                logger.warning("Group {} chart image send failed: {}", group_id, exc)

        return True


@driver.on_startup
async def _on_startup() -> None:
    await repo.init()
    logger.info("gradechart repository initialized at {}", settings.db_path)
    logger.info("gradechart enabled groups: {}", settings.enabled_groups)


@chart_msg.handle()
async def _handle_chart(bot: Bot, event: GroupMessageEvent) -> None:
    allowed = _is_group_allowed(event.group_id)
    if not allowed:
        logger.info("Whitelist check: group_id={} allowed={}", event.group_id, allowed)
        return

    raw_text = event.get_plaintext().strip()
    parsed = parse_bot_command(raw_text)
    if parsed is None:
        if raw_text.startswith("/"):
            logger.info(
                "Unrecognized slash command raw={!r} normalized={!r}",
                raw_text,
                normalize_command_text(raw_text),
            )
        return

    logger.info(
        "Received command {} {} from user {} in group {}",
        parsed.command,
        parsed.action,
        event.user_id,
        event.group_id,
    )

    if parsed.command == "h":
        await chart_msg.finish(ALL_HELP_TEXT)
    if parsed.action == "help" or parsed.assignment_id is None:
        await chart_msg.finish(CHART_HELP_TEXT)

    now = monotonic()
    last = _last_manual_trigger_at.get(event.group_id, 0.0)
    if now - last < MANUAL_TRIGGER_COOLDOWN_SECONDS:
        await chart_msg.finish("Too many requests, please try again shortly.")
    _last_manual_trigger_at[event.group_id] = now

    ok = await _send_chart(bot, event.group_id, event.user_id, parsed.assignment_id)
    if not ok:
        await chart_msg.finish("Grades chart failed, please check the bot log.")
