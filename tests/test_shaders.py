from ghosttrails import shaders as S


def test_shader_strings_exist():
    for name in ["VS", "FS_CANVAS", "VS_TEXT", "FS_TEXT"]:
        assert hasattr(S, name)
        assert isinstance(getattr(S, name), str)
        assert "#version 330" in getattr(S, name)


def test_shaders_compile(ctx):
    ctx.program(vertex_shader=S.VS, fragment_shader=S.FS_CANVAS)
    ctx.program(vertex_shader=S.VS_TEXT, fragment_shader=S.FS_TEXT)
