# -*- coding: utf-8 -*-
# 界面文案
CMD_BEAUTIFY_CODE = "Beautify Code"
CMD_BEAUTIFY_CODE_ON_SAVE = "Beautify Code on Save"
BEAUTIFY_PROJECT_BUSY_MESSAGE = "Beautifying {0}..."
BEAUTIFY_ERROR = "Cannot beautify code: no beautifier for this file type, or the code has errors."
BEAUTIFY_ERROR_SELECTION = "Cannot beautify the selection: no beautifier for this file type, or the selected code has errors."


def format_string(template: str, *args) -> str:
    return template.format(*args)
