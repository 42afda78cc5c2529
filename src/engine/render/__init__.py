"""
どこで: `engine.render` サブパッケージ。
何を: 行列/ベクトルをユニフォームバッファのバイト配置へ詰める入口。
なぜ: 計算（core）と GPU 転送用バイト列の責務を分離し、アラインメント規則を局所化するため。
"""
