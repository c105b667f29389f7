#!/usr/bin/env python3
"""
PyMC 配置模組
PyMC Configuration Module

在匯入 PyMC 之前設置 PyTensor 與執行緒環境變數
Set PyTensor and threading environment variables before PyMC is imported
"""

import os
from typing import Dict, Optional


def configure_pymc_environment(
    mode: str = "FAST_RUN",
    n_threads: Optional[int] = None,
    use_c_compiler: bool = True,
    verbose: bool = True
) -> Dict[str, Dict[str, Optional[str]]]:
    """
    配置 PyMC 環境 - 必須在 import pymc 之前呼叫才會生效
    Configure PyMC environment - only effective before pymc is imported

    Parameters:
    -----------
    mode : str
        PyTensor 編譯模式 ("FAST_COMPILE", "FAST_RUN")
    n_threads : int, optional
        OpenMP 線程數，None 時保留現值或預設為 1
    use_c_compiler : bool
        False 時停用 C 編譯 (cxx=)，適用於沒有編譯器的環境
    verbose : bool
        是否顯示配置信息

    Returns:
    --------
    dict: 配置前後的環境變數比較
    """
    if mode not in ("FAST_COMPILE", "FAST_RUN"):
        raise ValueError(f"Unsupported PyTensor mode: {mode}")

    keys = ('PYTENSOR_FLAGS', 'MKL_THREADING_LAYER', 'OMP_NUM_THREADS')
    old_config = {key: os.environ.get(key) for key in keys}

    flags = [f"mode={mode}"]
    if not use_c_compiler:
        flags.insert(0, "cxx=")
    os.environ["PYTENSOR_FLAGS"] = ",".join(flags)

    os.environ["MKL_THREADING_LAYER"] = "GNU"

    if n_threads is not None:
        os.environ["OMP_NUM_THREADS"] = str(n_threads)
    elif "OMP_NUM_THREADS" not in os.environ:
        os.environ["OMP_NUM_THREADS"] = "1"

    new_config = {key: os.environ.get(key) for key in keys}

    if verbose:
        print(f"🔧 PyMC 環境 (模式: {mode})")
        for key, value in new_config.items():
            print(f"   {key}: {old_config.get(key)} → {value}")

    return {'old_config': old_config, 'new_config': new_config}


def describe_pymc_setup() -> Dict[str, str]:
    """回傳採樣相關套件版本"""
    import arviz as az
    import pymc as pm
    import pytensor

    return {
        'pymc': pm.__version__,
        'pytensor': pytensor.__version__,
        'arviz': az.__version__
    }
