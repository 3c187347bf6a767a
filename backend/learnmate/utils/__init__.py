from learnmate.utils.normalize import normalize_string_list, normalize_to_string, repair_llm_json
from learnmate.utils.time import from_utc_naive, to_utc_naive, utcnow

__all__ = ["normalize_string_list", "normalize_to_string", "repair_llm_json", "from_utc_naive", "to_utc_naive", "utcnow"]
