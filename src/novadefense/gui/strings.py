from __future__ import annotations


LANGUAGES: dict[str, dict[str, str]] = {
    "en": {
        "title": "ANN NOVA DEFENSE",
        "start": "START GAME",
        "win": "MISSION ACCOMPLISHED",
        "lost": "DEFENSE BREACHED",
        "score": "SCORE",
        "ammo": "AMMO",
        "restart": "PLAY AGAIN",
        "instructions": "Click to intercept incoming rockets. Protect your cities!",
        "target": "TARGET: {win_score}",
        "hint": "Click or press Enter",
    },
    "zh": {
        "title": "Ann新星防御",
        "start": "开始游戏",
        "win": "任务完成",
        "lost": "防御失守",
        "score": "得分",
        "ammo": "弹药",
        "restart": "再玩一次",
        "instructions": "点击发射拦截导弹。保护你的城市！",
        "target": "目标: {win_score}",
        "hint": "点击或按回车键",
    },
}


def get_strings(lang: str) -> dict[str, str]:
    try:
        return LANGUAGES[lang]
    except KeyError as exc:
        raise KeyError(f"Unknown language: {lang!r}") from exc


def next_language(lang: str) -> str:
    codes = list(LANGUAGES)
    return codes[(codes.index(lang) + 1) % len(codes)]
