from .slide_renderer import lighten_color, render_slide_info, render_text_slide, wrap_text

__all__ = ["lighten_color", "render_slide_info", "render_text_slide", "wrap_text"]
