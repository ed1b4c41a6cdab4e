from __future__ import annotations

from html import escape


def render_file_field(element_id: str, state: str, error: str | None = None) -> str:
    if state == "error":
        return f"""
<div class="p-4 border border-error-200 rounded-lg bg-error-50">
  <div class="flex items-center space-x-2 text-error-600">
    <span class="text-sm font-medium">File Upload Error</span>
  </div>
  <p class="text-error-600 text-sm mt-1">{escape(error or "Unknown error")}</p>
  <button
    onclick="window.location.reload()"
    class="mt-2 px-3 py-1 bg-error-500 text-white text-sm rounded hover:bg-error-600"
  >Reload Page</button>
</div>
"""

    loading = ""
    if state not in ("ready", "updating"):
        loading = """
    <div class="flex items-center justify-center p-8 border-2 border-dashed border-slate-300 rounded-lg">
      <div class="text-center">
        <div class="animate-spin w-6 h-6 border-2 border-primary-500 border-t-transparent rounded-full mx-auto mb-2"></div>
        <p class="text-sm text-slate-600">Loading file uploader...</p>
      </div>
    </div>"""
    return f"""
<div class="w-full">
  <div id="{escape(element_id, quote=True)}" class="min-h-[100px]">{loading}
  </div>
</div>
"""
