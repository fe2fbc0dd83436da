# -*- coding: utf-8 -*-
"""
griddler.postprocess パッケージ

解いた結果を表示用・API 応答用の形に整えます。
"""
