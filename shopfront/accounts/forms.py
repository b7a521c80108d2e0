from django import forms


class LoginForm(forms.Form):
    """Форма входа: email + пароль, проверку делает auth-сервис."""

    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={"class": "form-control", "autocomplete": "email"})
    )
    password = forms.CharField(
        label="Password",
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "current-password"})
    )
