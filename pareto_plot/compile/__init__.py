from .frames import compile_full_rewrite_batch, compile_replace_patches_batch

__all__ = ["compile_full_rewrite_batch", "compile_replace_patches_batch"]
