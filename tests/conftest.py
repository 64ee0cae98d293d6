"""Shared fixtures — a small synthetic Bit BlazorUI checkout on disk."""

import pytest

from blazorseek.indexer.examples import DEMO_COMPONENTS_DIR
from blazorseek.indexer.pipeline import COMPONENT_ROOTS
from tests.helpers import write_file

BUTTON_CS = '''\
namespace Bit.BlazorUI;

/// <summary>
/// Buttons give people a way to trigger an action.
/// </summary>
/// <remarks>Use <see cref="BitButtonGroup"/> to group buttons.</remarks>
public partial class BitButton : BitComponentBase
{
    /// <summary>
    /// The visual variant of the button.
    /// </summary>
    [Parameter] public BitVariant? Variant { get; set; }

    /// <summary>Shows a loading spinner instead of the content.</summary>
    [Parameter] public bool IsLoading { get; set; } = false;

    /// <summary>The text of the button.</summary>
    [Parameter, EditorRequired] public string? Text { get; set; }

    [CascadingParameter] public BitDir? Dir { get; set; }

    /// <summary>Callback for when the button is clicked.</summary>
    [Parameter] public EventCallback<MouseEventArgs> OnClick { get; set; }

    [Parameter] public EventCallback OnHover { get; set; }

    public string? Title { get; set; }

    /// <summary>Gives focus to the button.</summary>
    public async Task FocusAsync(bool preventScroll, int delay) { }

    public void Reset() { }

    protected override void OnInitialized() { }

    private void Helper() { }
}
'''

TEXT_FIELD_CS = '''\
namespace Bit.BlazorUI
{
    /// <summary>Text fields let users enter text.</summary>
    public partial class BitTextField : BitTextInputBase<string?>
    {
        /// <summary>The placeholder text.</summary>
        [Parameter] public string? Placeholder { get; set; }
    }
}
'''

DATA_GRID_CS = '''\
namespace Bit.BlazorUI;

public class BitDataGrid<TGridItem> : ComponentBase
{
    [Parameter] public IQueryable<TGridItem>? Items { get; set; }
}
'''

BUTTON_DEMO_RAZOR = '''\
@page "/components/button"

<DocsPage Title="Button" SubTitle="Buttons trigger an action when clicked." />

<BitMessageBar>Set IsEnabled to false to disable the button.</BitMessageBar>

<DocsPageSection Title="Basic">
    <BitButton>Click</BitButton>
    Basic usage of the button.
</DocsPageSection>

<a href="/components/BitToggleButtonDemo">Toggle button</a>
'''

BUTTON_SAMPLES_CS = '''\
namespace Bit.BlazorUI.Demo.Client.Core.Pages.Components.Buttons.Button;

public partial class BitButtonDemo
{
    private readonly string example1RazorCode = @"
<BitButton Variant=""BitVariant.Fill"" Color=""BitColor.Primary"">Primary</BitButton>";

    private readonly string example2RazorCode = @"
<BitButton OnClick=""HandleClick"">Click me</BitButton>
<div>Clicked: @counter</div>";
    private readonly string example2CsharpCode = @"
private int counter;
private void HandleClick() => counter++;";
}
'''


@pytest.fixture
def bit_repo(tmp_path):
    """Checkout with a nested (Bit.BlazorUI) and a flat (Extras) component layout."""
    repo = tmp_path / "bitplatform"
    core = repo / COMPONENT_ROOTS[0]
    extras = repo / COMPONENT_ROOTS[1]

    write_file(core / "Buttons" / "Button" / "BitButton.razor", "<button>@Text</button>\n")
    write_file(core / "Buttons" / "Button" / "BitButton.razor.cs", BUTTON_CS)
    write_file(core / "Inputs" / "TextField" / "BitTextField.razor.cs", TEXT_FIELD_CS)
    write_file(extras / "DataGrid" / "BitDataGrid.cs", DATA_GRID_CS)

    demo = repo / DEMO_COMPONENTS_DIR / "Buttons" / "Button"
    write_file(demo / "BitButtonDemo.razor", BUTTON_DEMO_RAZOR)
    write_file(demo / "BitButtonDemo.razor.samples.cs", BUTTON_SAMPLES_CS)
    return repo
