VS = """
#version 330
in vec2 in_vert;
out vec2 uv;
void main(){ gl_Position = vec4(in_vert,0.0,1.0); uv = (in_vert + 1.0)*0.5; }
"""

# Shows the composited RGB canvas; uploads are already flipped to GL's origin.
FS_CANVAS = """
#version 330
in vec2 uv; out vec4 fragColor;
uniform sampler2D canvas;
void main(){ fragColor = vec4(texture(canvas, uv).rgb, 1.0); }
"""

VS_TEXT = """
#version 330
in vec2 in_vert;
in vec2 in_uv;
out vec2 uv;
void main() {
    gl_Position = vec4(in_vert, 0.0, 1.0);
    uv = in_uv;
}
"""

FS_TEXT = """
#version 330
in vec2 uv;
out vec4 fragColor;
uniform sampler2D fontTexture;
uniform vec3 textColor;
void main() {
    float alpha = texture(fontTexture, uv).r;
    fragColor = vec4(textColor, alpha);
}
"""
