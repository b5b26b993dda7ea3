from typing import Callable, Dict, List, Optional

from shadowbox.models import Match, generate_match_code


class MatchRegistry:
    """In-memory store of live matches keyed by match code.

    Also indexes participants (socket ids) to the code of the match they
    belong to, so inbound events can be resolved without client-supplied
    codes. One registry is created per Flask app.
    """

    def __init__(self, code_factory: Callable[[], str] = generate_match_code):
        self._code_factory = code_factory
        self._matches: Dict[str, Match] = {}
        self._participants: Dict[str, str] = {}

    def create(self, creator: str, policy) -> Match:
        code = self._code_factory()
        # regenerate until the code is free
        while code in self._matches:
            code = self._code_factory()
        match = Match(code=code, slot_a=creator, policy=policy, total_rounds=policy.total_rounds)
        self._matches[code] = match
        self._participants[creator] = code
        return match

    def get(self, code) -> Optional[Match]:
        if not code:
            return None
        return self._matches.get(str(code).strip().upper())

    def delete(self, code: str) -> Optional[Match]:
        match = self._matches.pop(code, None)
        if match is not None:
            for sid in (match.slot_a, match.slot_b):
                if sid is not None and self._participants.get(sid) == code:
                    del self._participants[sid]
        return match

    def bind(self, sid: str, code: str) -> None:
        self._participants[sid] = code

    def match_for(self, sid: str) -> Optional[Match]:
        return self.get(self._participants.get(sid))

    def is_live(self, match: Match) -> bool:
        return self._matches.get(match.code) is match

    def codes(self) -> List[str]:
        return list(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def __contains__(self, code) -> bool:
        return self.get(code) is not None
