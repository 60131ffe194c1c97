# qqbotplugins

This package holds the logic behind a set of group-chat bot features. Everything runs on the standard library and SQLite. You connect the pieces to whatever bot framework you use.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | What it does |
| --- | --- |
| `qqbotplugins.marriage` | `MarriageRegistry` keeps a register for each group with one couple per person per day, stored in a `sqlite3.Connection` that you pass in. It also holds `GroupSettings` for each group (`can_match`, `can_ntr`, `cd_hours`, default 12). Methods: `open_for_today` clears a group's roster when the day changes, plus `lookup`, `register`, `roster`, `reset`, `divorce_wife` and `divorce_husband`. `Marriage` is one couple record. `slice_name` shortens a name whose measured width is over a limit. |
| `qqbotplugins.cooldown` | `CooldownBook` tracks skill cooldowns for each group, user and mode, measured in hours, using the same kind of connection. Methods: `ready`, `record` and `clear_group`. |
| `qqbotplugins.marriage_rules` | Eligibility checks that raise `RuleViolation`, whose `message` is the reply text: `check_single`, `check_mistress`, `check_divorce` and `check_matchmaker`. Success rolls: `proposal_succeeds`, `ntr_succeeds` and `divorce_succeeds`. Canned replies: `LineKind` with `pick_line`. |
| `qqbotplugins.runcode` | `cut_too_long` truncates program output after 30 line breaks or 1000 characters. |
| `qqbotplugins.nsfw` | `judge` and `auto_judge` turn the classifier scores on a `Picture` into a verdict. `auto_judge` returns `None` when the picture is not flagged. |
| `qqbotplugins.score` | `ScoreStore` is an SQLite store of levels and sign-in counts, and can be used as a context manager. `sign_in` gives a `SignInResult`: whether the user had already signed in, the new level, the rank, the coins earned, and whether the level hit the cap. Also `hour_word`, `rank_of` and `next_rank_score`. |
| `qqbotplugins.sleep` | `SleepStore` records good-night (`sleep`) and good-morning (`get_up`) times and returns the user's position in the group along with the time elapsed. Helpers: `split_duration`, `is_morning`, `is_evening`, `good_night_text` and `good_morning_text`. |
| `qqbotplugins.nativewife` | `WifeGallery` keeps a folder of named pictures for each group, named by the group id in base 36. `draw` gives each member a pick that stays the same for the whole day and raises `NoWifeError` when the folder is empty. Also `add`, `remove`, `extract_name`, `base36` and `day_seed`. |
| `qqbotplugins.reborn` | `Reborn` picks a country using weights (from a JSON list of `name`/`weight` entries via `from_json`) and a gender. `reborn()` returns the reply text. |
| `qqbotplugins.tarot` | `TarotDeck` is built from card and spread JSON with `from_json`. It supports `draw`, `spread`, `lookup` and `card_list_text`. `ArcanaKind` selects the major arcana, the minor arcana or both. `DrawnCard`, `Card` and `Formation` hold the data. `SpreadNotFound` and `parse_draw_count` are also provided. |
| `qqbotplugins.qzone_store` | `QzoneStore` stores login cookies and submissions to a confession wall (`Emotion`, with statuses waiting, agreed and refused). Methods: `insert_or_update`, `get_by_uin` (raises `RecordNotFound`), `save_emotion`, `emotions_by_ids`, `love_emotions_by_status` (pages of 5, newest first) and `update_status`. `Emotion.brief()` gives a summary for reviewers. |

## Example

```python
import random
import sqlite3
from datetime import datetime

from qqbotplugins.cooldown import CooldownBook
from qqbotplugins.marriage import MarriageRegistry
from qqbotplugins.marriage_rules import RuleViolation, check_single, proposal_succeeds

conn = sqlite3.connect(":memory:")
registry = MarriageRegistry(conn)
cooldowns = CooldownBook(conn)

now = datetime.now()
try:
    check_single(registry, cooldowns, 1001, 42, 43, now)
except RuleViolation as refusal:
    print(refusal.message)
else:
    cooldowns.record(1001, 42, "嫁娶", now)
    if proposal_succeeds(favor=0, roll=random.Random(1).randrange(101)):
        registry.register(1001, 42, 43, "alice", "bob", now)
print(registry.lookup(1001, 43))
```

Functions that involve chance take an explicit `rng` (a `random.Random`) or a roll, so you can seed them for repeatable results. Functions that depend on the time take an explicit `now`.

## What this package does not do

- It has no bot, no command parsing, no messaging layer and no network access. Nothing here downloads images, calls web APIs or sends replies. The caller does all of that.
- It does not render images, charts or rosters. `slice_name` takes a width-measuring function that you supply.
- It does not store favorability between users. The success rolls in `marriage_rules` take a favorability value that you supply. `MarriageRegistry.reset()` with no group leaves a table named `favorability` in place, but nothing in the package creates or reads that table.
- It does not keep a coin wallet. `sign_in` reports the coins earned, and you decide where to credit them.