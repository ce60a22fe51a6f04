from copy import deepcopy

from assignment_ai.history_core.domain.snapshot import Snapshot, coerce_snapshot


DEFAULT_RATIOS = {
    "turnoverRate": 0.3,
    "storeCount": 0.2,
    "remainingInventory": 0.3,
    "salesVolume": 0.2,
}

SALES_HEAVY_RATIOS = {
    "turnoverRate": 0.2,
    "storeCount": 0.1,
    "remainingInventory": 0.2,
    "salesVolume": 0.5,
}

# 3월 1일 배정: 서울 2명, 부산 1명, 소속 미지정 1명
BASE_SNAPSHOT = {
    "id": "assignment_1740819600000_base",
    "timestamp": "2025-03-01T09:00:00+00:00",
    "assignmentData": {
        "models": {
            "Galaxy S25": {"totalQuantity": 20, "assignedQuantity": 14},
            "iPhone 16": {"totalQuantity": 12, "assignedQuantity": 10},
        }
    },
    "settings": {"ratios": DEFAULT_RATIOS},
    "agents": [
        {
            "agentId": "A1",
            "target": "김민수",
            "office": "서울",
            "department": "영업1팀",
            "quantity": 10,
            "models": {
                "Galaxy S25": {"quantity": 6, "colors": {"Black": 4, "Silver": 2}},
                "iPhone 16": {"quantity": 4, "colors": {"Black": 4}},
            },
        },
        {
            "agentId": "A2",
            "target": "이서연",
            "office": "서울",
            "department": "영업2팀",
            "quantity": 8,
            "models": {"Galaxy S25": {"quantity": 8, "colors": {"Black": 5, "Blue": 3}}},
        },
        {
            "agentId": "A3",
            "target": "박지훈",
            "office": "부산",
            "department": "영업1팀",
            "quantity": 6,
            "models": {"iPhone 16": {"quantity": 6, "colors": {"White": 6}}},
        },
        {"agentId": "A4", "target": "최유진", "quantity": 0, "models": {}},
    ],
    "metadata": {
        "name": "3월 1주차 배정",
        "totalAgents": 4,
        "totalModels": 2,
        "totalAssigned": 24,
        "totalQuantity": 32,
    },
    "version": "1.0",
}

# 10일 뒤 배정: A1 증가, A2 색상만 변경, A3 제외, 대구 A5 추가
NEXT_SNAPSHOT = {
    "id": "assignment_1741683600000_next",
    "timestamp": "2025-03-11T09:00:00+00:00",
    "assignmentData": {
        "models": {
            "Galaxy S25": {"totalQuantity": 20, "assignedQuantity": 16},
            "iPhone 16": {"totalQuantity": 12, "assignedQuantity": 6},
            "Galaxy Z Flip6": {"totalQuantity": 15, "assignedQuantity": 10},
        }
    },
    "settings": {"ratios": SALES_HEAVY_RATIOS},
    "agents": [
        {
            "agentId": "A1",
            "target": "김민수",
            "office": "서울",
            "department": "영업1팀",
            "quantity": 14,
            "models": {
                "Galaxy S25": {"quantity": 8, "colors": {"Black": 5, "Silver": 3}},
                "iPhone 16": {"quantity": 6, "colors": {"Black": 6}},
            },
        },
        {
            "agentId": "A2",
            "target": "이서연",
            "office": "서울",
            "department": "영업2팀",
            "quantity": 8,
            "models": {"Galaxy S25": {"quantity": 8, "colors": {"Black": 3, "Blue": 5}}},
        },
        {"agentId": "A4", "target": "최유진", "quantity": 0, "models": {}},
        {
            "agentId": "A5",
            "target": "정하늘",
            "office": "대구",
            "department": "영업2팀",
            "quantity": 10,
            "models": {"Galaxy Z Flip6": {"quantity": 10, "colors": {"Yellow": 10}}},
        },
    ],
    "metadata": {
        "name": "3월 2주차 배정",
        "totalAgents": 4,
        "totalModels": 3,
        "totalAssigned": 32,
        "totalQuantity": 47,
    },
    "version": "1.0",
}


def base_snapshot() -> Snapshot:
    return coerce_snapshot(deepcopy(BASE_SNAPSHOT))


def next_snapshot() -> Snapshot:
    return coerce_snapshot(deepcopy(NEXT_SNAPSHOT))
