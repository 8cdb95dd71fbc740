from __future__ import annotations

from typing import Dict, List, Union

DEFAULT_BUTTONS: List[Dict[str, Union[str, float]]] = [
    {"name": "Đi muộn", "points": -5, "type": "penalty"},
    {"name": "Không làm BTVN", "points": -10, "type": "penalty"},
    {"name": "Nói chuyện trong giờ", "points": -5, "type": "penalty"},
    {"name": "Không mặc đồng phục", "points": -10, "type": "penalty"},
    {"name": "Giúp đỡ bạn", "points": 5, "type": "bonus"},
    {"name": "Phát biểu tốt", "points": 5, "type": "bonus"},
    {"name": "Điểm 10", "points": 10, "type": "bonus"},
    {"name": "Hoạt động tích cực", "points": 10, "type": "bonus"},
]
