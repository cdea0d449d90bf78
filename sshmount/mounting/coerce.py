# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import Any, Dict, List

from typeguard import typechecked


@typechecked
def ensure_dict(x: Any) -> Dict[str, Any]:
    return x


@typechecked
def ensure_str_dict(x: Any) -> Dict[str, str]:
    return x


@typechecked
def ensure_list_of_dicts(x: Any) -> List[Dict[str, Any]]:
    return x
